"""Model for crowd votes on pub amenity flags."""

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from pintwatch.db.session import Base


class AmenityVote(Base):
    """Per-user yes/no vote on one amenity of one pub."""

    __tablename__ = "amenity_vote"
    __table_args__ = (Index("ix_amenity_vote_pub_amenity", "pub_id", "amenity"),)

    pub_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("pub.id", ondelete="CASCADE"),
        primary_key=True,
    )
    amenity: Mapped[str] = mapped_column(String(40), primary_key=True)
    voter_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    # True = yes, False = no.
    vote: Mapped[bool] = mapped_column(Boolean, nullable=False)
