from datetime import timedelta

import pytest

from interview_session import Account, ScheduledMock
from services.errors import ValidationError
from services.mocks import MockScheduler, next_reminder
from storage.mocks import MockStore


def _mock(start, stage="unset"):
    return ScheduledMock(account_id="user-1", email="user@example.com", scheduled_for=start, reminder_stage=stage)


@pytest.mark.parametrize(
    "minutes_left, stage, expected",
    [
        (120, "unset", None),
        (60, "unset", "1h"),
        (45, "1h", None),
        (30, "1h", "30m"),
        (4, "unset", "5m"),
        (4, "5m", None),
        (20, "30m", None),
        (0, "unset", None),
        (-10, "30m", None),
    ],
)
def test_next_reminder_moves_forward_only(mid_october, minutes_left, stage, expected):
    mock = _mock(mid_october + timedelta(minutes=minutes_left), stage)
    assert next_reminder(mock, mid_october) == expected


def test_schedule_requires_future_time(mid_october):
    scheduler = MockScheduler(MockStore())
    account = Account(account_id="user-1", email="user@example.com", plan="Premium")
    with pytest.raises(ValidationError):
        scheduler.schedule(account, scheduled_for=mid_october, now=mid_october)


def test_schedule_and_list_soonest_first(mid_october):
    scheduler = MockScheduler(MockStore())
    account = Account(account_id="user-1", email="user@example.com", plan="Premium")
    later = scheduler.schedule(account, scheduled_for=mid_october + timedelta(days=2), job_role="SRE", now=mid_october)
    sooner = scheduler.schedule(account, scheduled_for=mid_october + timedelta(hours=3), now=mid_october)

    listed = scheduler.list("user-1")
    assert [mock.id for mock in listed] == [sooner.id, later.id]
    assert listed[1].job_role == "SRE"
    assert listed[0].email == "user@example.com"
    assert scheduler.list("someone-else") == []


def test_advance_reminders_records_stage_once(mid_october):
    store = MockStore()
    store.insert(_mock(mid_october + timedelta(minutes=50)))
    store.insert(_mock(mid_october + timedelta(days=1)))
    scheduler = MockScheduler(store)

    due = scheduler.advance_reminders(mid_october)
    assert [stage for _, stage in due] == ["1h"]
    assert scheduler.advance_reminders(mid_october) == []

    due = scheduler.advance_reminders(mid_october + timedelta(minutes=46))
    assert [stage for _, stage in due] == ["5m"]
    assert sorted(mock.reminder_stage for mock in store.list()) == ["5m", "unset"]
