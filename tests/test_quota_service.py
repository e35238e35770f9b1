"""Tests for the daily quota gate."""

from datetime import UTC, datetime, timedelta

import pytest

from calorie_scanner.domain.errors import QuotaExceeded
from calorie_scanner.services.quota import QuotaService
from tests.conftest import ADMIN, USER, InMemoryScanRepository

NOW = datetime(2026, 3, 10, 3, 0, tzinfo=UTC)


@pytest.mark.parametrize("count", [0, 1, 2, 3])
def test_remaining_counts_down_for_standard_user(count: int) -> None:
    repository = InMemoryScanRepository()
    for _ in range(count):
        repository.add(USER.id, NOW - timedelta(minutes=5))
    service = QuotaService(counter=repository, admin_email="admin@example.com")

    status = service.check(USER, "UTC", NOW)

    assert status.remaining == 3 - count
    assert status.is_admin is False
    assert status.allowed is (count < 3)


def test_remaining_never_negative() -> None:
    repository = InMemoryScanRepository()
    for _ in range(5):
        repository.add(USER.id, NOW - timedelta(minutes=1))
    service = QuotaService(counter=repository)

    status = service.check(USER, "UTC", NOW)

    assert status.remaining == 0
    assert status.allowed is False


def test_singapore_user_with_two_scans_today_has_one_left() -> None:
    repository = InMemoryScanRepository()
    # 01:00 and 10:00 on 10 March in Singapore
    repository.add(USER.id, datetime(2026, 3, 9, 17, 0, tzinfo=UTC))
    repository.add(USER.id, datetime(2026, 3, 10, 2, 0, tzinfo=UTC))
    # 23:00 on 9 March in Singapore
    repository.add(USER.id, datetime(2026, 3, 9, 15, 0, tzinfo=UTC))
    service = QuotaService(counter=repository, admin_email="admin@example.com")

    status = service.check(USER, "Asia/Singapore", NOW)

    assert status.remaining == 1
    assert status.is_admin is False


def test_window_follows_requested_timezone() -> None:
    repository = InMemoryScanRepository()
    repository.add(USER.id, datetime(2026, 3, 9, 17, 0, tzinfo=UTC))
    service = QuotaService(counter=repository)

    assert service.check(USER, "Asia/Singapore", NOW).remaining == 2
    assert service.check(USER, "UTC", NOW).remaining == 3


def test_other_users_scans_do_not_count() -> None:
    repository = InMemoryScanRepository()
    repository.add("someone-else", NOW - timedelta(minutes=1))
    service = QuotaService(counter=repository)

    assert service.check(USER, "UTC", NOW).remaining == 3


def test_admin_bypasses_quota_without_counting() -> None:
    repository = InMemoryScanRepository(fail_reads=True)
    service = QuotaService(counter=repository, admin_email=" admin@example.com ")

    status = service.enforce(ADMIN, "UTC", NOW)

    assert status.is_admin is True
    assert status.allowed is True
    assert repository.count_calls == 0


def test_admin_bypasses_quota_regardless_of_count() -> None:
    repository = InMemoryScanRepository()
    for _ in range(10):
        repository.add(ADMIN.id, NOW - timedelta(minutes=1))
    service = QuotaService(counter=repository, admin_email="admin@example.com")

    assert service.check(ADMIN, "UTC", NOW).is_admin is True


def test_nobody_is_admin_without_configured_email() -> None:
    service = QuotaService(counter=InMemoryScanRepository(), admin_email=None)

    assert service.is_admin(ADMIN) is False


def test_enforce_raises_when_limit_reached() -> None:
    repository = InMemoryScanRepository()
    for _ in range(3):
        repository.add(USER.id, NOW - timedelta(minutes=1))
    service = QuotaService(counter=repository)

    with pytest.raises(QuotaExceeded) as exc_info:
        service.enforce(USER, "UTC", NOW)

    assert "3" in exc_info.value.message
    assert exc_info.value.status_code == 429


def test_store_failure_propagates() -> None:
    service = QuotaService(counter=InMemoryScanRepository(fail_reads=True))

    with pytest.raises(RuntimeError):
        service.check(USER, "UTC", NOW)
