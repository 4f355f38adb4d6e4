"""Scheduled mock interviews and reminder progression."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from interview_session import Account, Mode, ReminderStage, ScheduledMock, utc_now
from storage.mocks import MockStore

from .errors import ValidationError

logger = logging.getLogger(__name__)

STAGE_ORDER: Tuple[ReminderStage, ...] = ("unset", "1h", "30m", "5m")

# Tightest window first so a late check jumps straight to the closest stage.
REMINDER_WINDOWS: Tuple[Tuple[ReminderStage, timedelta], ...] = (
    ("5m", timedelta(minutes=5)),
    ("30m", timedelta(minutes=30)),
    ("1h", timedelta(hours=1)),
)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def next_reminder(mock: ScheduledMock, now: datetime) -> Optional[ReminderStage]:
    """Return the reminder stage due for ``mock`` at ``now``, if any.

    Stages only move forward and nothing is due once the mock has started.
    """

    remaining = _as_utc(mock.scheduled_for) - _as_utc(now)
    if remaining <= timedelta(0):
        return None
    current = STAGE_ORDER.index(mock.reminder_stage)
    for stage, window in REMINDER_WINDOWS:
        if remaining <= window:
            return stage if STAGE_ORDER.index(stage) > current else None
    return None


class MockScheduler:
    def __init__(self, mocks: MockStore) -> None:
        self._mocks = mocks

    def schedule(
        self,
        account: Account,
        *,
        scheduled_for: datetime,
        mode: Optional[Mode] = None,
        job_role: Optional[str] = None,
        industry: Optional[str] = None,
        experience: Optional[str] = None,
        resume_text: Optional[str] = None,
        job_description: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ScheduledMock:
        current = _as_utc(now or utc_now())
        if _as_utc(scheduled_for) <= current:
            raise ValidationError("Scheduled time must be in the future")
        mock = ScheduledMock(
            account_id=account.account_id,
            email=account.email,
            scheduled_for=_as_utc(scheduled_for),
            mode=mode,
            job_role=job_role,
            industry=industry,
            experience=experience,
            resume_text=resume_text,
            job_description=job_description,
            created_at=current,
        )
        self._mocks.insert(mock)
        logger.info("Scheduled mock id=%s account=%s for=%s", mock.id, mock.account_id, mock.scheduled_for.isoformat())
        return mock

    def list(self, account_id: Optional[str] = None) -> List[ScheduledMock]:
        return self._mocks.list(account_id)

    def advance_reminders(self, now: Optional[datetime] = None) -> List[Tuple[ScheduledMock, ReminderStage]]:
        """Record every reminder that is now due and return them for delivery."""

        current = now or utc_now()
        due: List[Tuple[ScheduledMock, ReminderStage]] = []
        for mock in self._mocks.list():
            stage = next_reminder(mock, current)
            if stage is None:
                continue
            self._mocks.set_reminder_stage(mock.id, stage)
            due.append((mock.model_copy(update={"reminder_stage": stage}), stage))
        if due:
            logger.info("Reminders due: %d", len(due))
        return due


__all__ = ["MockScheduler", "REMINDER_WINDOWS", "STAGE_ORDER", "next_reminder"]
