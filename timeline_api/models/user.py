"""
User model for authentication and ownership.
"""
from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import String, DateTime, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timeline_api.database import Base

if TYPE_CHECKING:
    from timeline_api.models.timeline import Timeline
    from timeline_api.models.vendor import Vendor, VendorType


class User(Base):
    """User model for storing user account information."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    username: Mapped[str] = mapped_column(
        String(100), unique=True, index=True, nullable=False
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    timelines: Mapped[List["Timeline"]] = relationship(
        "Timeline", back_populates="owner", cascade="all, delete-orphan",
        passive_deletes=True,
    )
    vendors: Mapped[List["Vendor"]] = relationship(
        "Vendor", back_populates="owner", cascade="all, delete-orphan",
        passive_deletes=True,
    )
    vendor_types: Mapped[List["VendorType"]] = relationship(
        "VendorType", cascade="all, delete-orphan", passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id})>"
