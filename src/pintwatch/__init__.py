"""Pintwatch: community consensus and moderation engine for pub listings."""

__version__ = "0.1.0"
