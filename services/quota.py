"""Monthly interview quota policy."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Protocol, Tuple

from config.settings import settings
from interview_session import Account

from .errors import MissingIdentity, QuotaExceeded

logger = logging.getLogger(__name__)


class SessionCounter(Protocol):
    def count_created_between(self, account_id: str, start: datetime, end: datetime) -> int: ...


def month_window(now: datetime) -> Tuple[datetime, datetime]:
    """Return ``[first instant of the UTC month, first instant of the next month)``."""

    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


class QuotaPolicy:
    """Decide whether an account may create another interview.

    Accounts without a stored record and Premium accounts are unlimited.
    Free accounts get ``monthly_limit`` sessions per calendar month.
    """

    def __init__(self, sessions: SessionCounter, *, monthly_limit: Optional[int] = None) -> None:
        self._sessions = sessions
        self.monthly_limit = settings.FREE_PLAN_MONTHLY_LIMIT if monthly_limit is None else monthly_limit

    def can_create(self, account_id: Optional[str], account: Optional[Account], now: datetime) -> bool:
        if not account_id:
            raise MissingIdentity()
        if account is None or account.plan == "Premium":
            # An account upgraded earlier this month is Premium by now, so it
            # needs no separate branch.
            return True
        start, end = month_window(now)
        used = self._sessions.count_created_between(account_id, start, end)
        logger.debug("Quota check account=%s used=%d limit=%d", account_id, used, self.monthly_limit)
        return used < self.monthly_limit

    def enforce(self, account_id: Optional[str], account: Optional[Account], now: datetime) -> None:
        if not self.can_create(account_id, account, now):
            logger.info("Quota exceeded for account=%s", account_id)
            raise QuotaExceeded(
                f"Free plan users can only take {self.monthly_limit} mock interviews per month. "
                "Upgrade to Premium for unlimited access."
            )


__all__ = ["QuotaPolicy", "month_window"]
