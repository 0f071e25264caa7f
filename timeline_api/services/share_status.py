"""
Visibility rules of public timeline shares.

Expiry is evaluated against the server clock on every call. The clock is a
plain callable so callers (and tests) can supply a fixed "now".
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from timeline_api.models.share import PublicTimelineShare
from timeline_api.schemas.share import ShareState

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current server time as naive UTC, matching the stored timestamps."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize an aware datetime to naive UTC. Naive values are assumed UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class ShareStatus:
    """Owner-facing status of a timeline's share row."""

    state: ShareState
    expires_at: Optional[datetime] = None
    show_vendors: bool = False
    share_token: Optional[str] = None

    @property
    def is_shared(self) -> bool:
        return self.state is ShareState.ACTIVE

    @property
    def is_expired(self) -> bool:
        return self.state is ShareState.EXPIRED


def is_expired(share: PublicTimelineShare, now: datetime) -> bool:
    """True once `now` has reached expires_at. Shares without expiry never expire."""
    return share.expires_at is not None and share.expires_at <= now


def is_accessible(share: Optional[PublicTimelineShare], now: datetime) -> bool:
    """Strict gate for anonymous viewers: enabled and not expired."""
    if share is None:
        return False
    return bool(share.is_enabled) and not is_expired(share, now)


def resolve(share: Optional[PublicTimelineShare], now: datetime) -> ShareStatus:
    """
    Derive the tri-state status of a share row.

    A revoked row reads as NOT_SHARED but still reports expires_at and
    show_vendors so the owner UI can display the stored configuration.
    The token is only returned while the share is enabled.
    """
    if share is None:
        return ShareStatus(state=ShareState.NOT_SHARED)

    if not share.is_enabled:
        return ShareStatus(
            state=ShareState.NOT_SHARED,
            expires_at=share.expires_at,
            show_vendors=share.show_vendors,
        )

    state = ShareState.EXPIRED if is_expired(share, now) else ShareState.ACTIVE
    return ShareStatus(
        state=state,
        expires_at=share.expires_at,
        show_vendors=share.show_vendors,
        share_token=share.share_token,
    )
