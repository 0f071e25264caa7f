"""
Timeline models: the timeline itself, its categories and its events.
"""
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import JSON, String, DateTime, Integer, ForeignKey, Text, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timeline_api.database import Base

if TYPE_CHECKING:
    from timeline_api.models.user import User
    from timeline_api.models.share import PublicTimelineShare


class Timeline(Base):
    """
    An event timeline (wedding, conference, party) owned by a single user.
    Deleting a timeline removes its categories, events, vendor links and share.
    """

    __tablename__ = "timelines"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[str] = mapped_column(String(50), nullable=False)
    type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Display switches
    categories_enabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    vendors_enabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Owner-defined fields, never exposed publicly
    custom_field_values: Mapped[Dict[str, Any]] = mapped_column(
        JSON, default=dict, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    owner: Mapped["User"] = relationship("User", back_populates="timelines")
    categories: Mapped[List["TimelineCategory"]] = relationship(
        "TimelineCategory", cascade="all, delete-orphan", passive_deletes=True,
    )
    events: Mapped[List["TimelineEvent"]] = relationship(
        "TimelineEvent", cascade="all, delete-orphan", passive_deletes=True,
    )
    share: Mapped[Optional["PublicTimelineShare"]] = relationship(
        "PublicTimelineShare", back_populates="timeline",
        cascade="all, delete-orphan", passive_deletes=True,
        uselist=False,
    )

    def __repr__(self) -> str:
        return f"<Timeline(id={self.id}, title={self.title})>"


class TimelineCategory(Base):
    """Grouping of events inside a timeline, displayed by ascending order."""

    __tablename__ = "timeline_categories"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    timeline_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("timelines.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<TimelineCategory(id={self.id}, order={self.order})>"


class TimelineEvent(Base):
    """
    A single scheduled item of a timeline.
    start_time/end_time are wall-clock HH:MM strings without timezone.
    """

    __tablename__ = "timeline_events"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    timeline_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("timelines.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Events outlive their category
    category_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("timeline_categories.id", ondelete="SET NULL"), nullable=True
    )

    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    duration: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    type: Mapped[str] = mapped_column(String(100), nullable=False, default="event")
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<TimelineEvent(id={self.id}, order={self.order})>"
