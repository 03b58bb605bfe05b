"""Operational scripts for Pintwatch."""
