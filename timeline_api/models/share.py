"""
Public share model for read-only anonymous access to a timeline.
"""
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, DateTime, Integer, ForeignKey, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timeline_api.database import Base

if TYPE_CHECKING:
    from timeline_api.models.timeline import Timeline


class PublicTimelineShare(Base):
    """
    Public share configuration of a timeline.

    One row per timeline. Rotating the link replaces share_token in place;
    revoking flips is_enabled and keeps the row.
    """

    __tablename__ = "public_timeline_shares"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    timeline_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("timelines.id", ondelete="CASCADE"),
        unique=True, nullable=False,
    )

    # Bearer credential of anonymous viewers
    share_token: Mapped[str] = mapped_column(
        String(128), unique=True, index=True, nullable=False
    )

    is_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    # NULL means never expires. Naive UTC.
    expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True
    )
    show_vendors: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    timeline: Mapped["Timeline"] = relationship("Timeline", back_populates="share")

    def __repr__(self) -> str:
        return f"<PublicTimelineShare(id={self.id}, timeline_id={self.timeline_id})>"
