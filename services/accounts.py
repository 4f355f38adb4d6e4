"""Account administration: plan changes, premium gate and erasure."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from interview_session import Account
from storage.accounts import AccountStore
from storage.mocks import MockStore
from storage.sessions import SessionStore

from .errors import NotFound, PremiumRequired, Unauthenticated, ValidationError

logger = logging.getLogger(__name__)

PLANS = ("Free", "Premium")


class AccountService:
    def __init__(self, accounts: AccountStore, sessions: SessionStore, mocks: MockStore) -> None:
        self._accounts = accounts
        self._sessions = sessions
        self._mocks = mocks

    def list_accounts(self) -> List[Account]:
        return self._accounts.list()

    def set_plan(self, account_id: str, plan: Optional[str]) -> Account:
        if plan not in PLANS:
            raise ValidationError("Invalid plan")
        account = self._accounts.set_plan(account_id, plan)  # type: ignore[arg-type]
        if account is None:
            raise NotFound("User not found")
        logger.info("Plan changed account=%s plan=%s", account_id, plan)
        return account

    def require_premium(self, account_id: Optional[str]) -> Account:
        if not account_id:
            raise Unauthenticated()
        account = self._accounts.get(account_id)
        if account is None:
            raise NotFound("User not found")
        if account.plan != "Premium":
            raise PremiumRequired()
        return account

    def erase(self, account_id: str) -> Dict[str, int]:
        """Delete the account and everything it owns."""

        if self._accounts.get(account_id) is None:
            raise NotFound("User not found")
        sessions = self._sessions.delete_for_account(account_id)
        mocks = self._mocks.delete_for_account(account_id)
        self._accounts.delete(account_id)
        logger.info("Erased account=%s sessions=%d mocks=%d", account_id, sessions, mocks)
        return {"sessions": sessions, "scheduledMocks": mocks}


__all__ = ["AccountService", "PLANS"]
