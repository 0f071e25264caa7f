"""Share visibility rules evaluated against a fixed clock"""
from datetime import datetime, timedelta, timezone

import pytest

from timeline_api.models.share import PublicTimelineShare
from timeline_api.schemas.share import ShareState
from timeline_api.services.share_status import (
    is_accessible,
    is_expired,
    resolve,
    to_naive_utc,
)

NOW = datetime(2026, 6, 1, 12, 0, 0)


def make_share(**overrides) -> PublicTimelineShare:
    values = {
        "timeline_id": 1,
        "share_token": "tok",
        "is_enabled": True,
        "show_vendors": False,
        "expires_at": None,
    }
    values.update(overrides)
    return PublicTimelineShare(**values)


class TestResolve:
    def test_no_share_is_not_shared(self):
        status = resolve(None, NOW)

        assert status.state is ShareState.NOT_SHARED
        assert status.is_shared is False
        assert status.is_expired is False
        assert status.share_token is None
        assert status.expires_at is None

    def test_enabled_without_expiry_is_active(self):
        status = resolve(make_share(), NOW)

        assert status.state is ShareState.ACTIVE
        assert status.is_shared is True
        assert status.share_token == "tok"

    def test_expiry_one_second_ahead_is_active(self):
        share = make_share(expires_at=NOW + timedelta(seconds=1))

        assert resolve(share, NOW).state is ShareState.ACTIVE
        assert is_accessible(share, NOW)

    def test_expiry_one_second_behind_is_expired(self):
        expires_at = NOW - timedelta(seconds=1)
        status = resolve(make_share(expires_at=expires_at), NOW)

        assert status.state is ShareState.EXPIRED
        assert status.is_shared is False
        assert status.is_expired is True
        assert status.expires_at == expires_at
        # The owner still sees the token of an expired link
        assert status.share_token == "tok"

    def test_expiry_equal_to_now_is_expired(self):
        share = make_share(expires_at=NOW)

        assert is_expired(share, NOW)
        assert not is_accessible(share, NOW)

    def test_revoked_without_expiry_is_not_shared(self):
        status = resolve(make_share(is_enabled=False, show_vendors=True), NOW)

        assert status.state is ShareState.NOT_SHARED
        assert status.is_shared is False
        assert status.is_expired is False
        assert status.share_token is None
        assert status.show_vendors is True

    def test_revoked_and_expired_reads_as_not_shared(self):
        share = make_share(is_enabled=False, expires_at=NOW - timedelta(days=1))

        assert resolve(share, NOW).state is ShareState.NOT_SHARED


class TestIsAccessible:
    @pytest.mark.parametrize(
        "is_enabled,expires_at,expected",
        [
            (True, None, True),
            (True, NOW + timedelta(minutes=5), True),
            (True, NOW - timedelta(minutes=5), False),
            (False, None, False),
            (False, NOW + timedelta(minutes=5), False),
        ],
    )
    def test_enabled_and_not_expired(self, is_enabled, expires_at, expected):
        share = make_share(is_enabled=is_enabled, expires_at=expires_at)
        assert is_accessible(share, NOW) is expected

    def test_missing_share_is_not_accessible(self):
        assert is_accessible(None, NOW) is False

    def test_same_share_flips_when_clock_passes_expiry(self):
        share = make_share(expires_at=NOW)

        assert is_accessible(share, NOW - timedelta(seconds=1))
        assert not is_accessible(share, NOW + timedelta(seconds=1))


class TestToNaiveUtc:
    def test_aware_value_is_converted_to_utc(self):
        aware = datetime(2026, 6, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_naive_utc(aware) == datetime(2026, 6, 1, 12, 0)

    def test_naive_value_and_none_pass_through(self):
        assert to_naive_utc(NOW) == NOW
        assert to_naive_utc(None) is None
