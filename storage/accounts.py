"""Persistence helpers for subscriber accounts."""
from __future__ import annotations

import sqlite3
from typing import List, Optional

from interview_session import Account, Plan, utc_now
from services.errors import StorageError

from .sqlite import from_db_time, get_conn, to_db_time

_COLUMNS = (
    "account_id, email, plan, billing_customer_id, billing_subscription_id, created_at, updated_at"
)


def _row_to_account(row: sqlite3.Row) -> Account:
    return Account(
        account_id=row["account_id"],
        email=row["email"],
        plan=row["plan"],
        billing_customer_id=row["billing_customer_id"],
        billing_subscription_id=row["billing_subscription_id"],
        created_at=from_db_time(row["created_at"]),
        updated_at=from_db_time(row["updated_at"]),
    )


class AccountStore:  # SQLite-backed account storage
    def __init__(self, db_path: Optional[str] = None) -> None:
        self._path = db_path

    def get(self, account_id: str) -> Optional[Account]:
        with get_conn(self._path) as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM accounts WHERE account_id = ?",
                (account_id,),
            ).fetchone()
        return _row_to_account(row) if row else None

    def get_or_create(self, account_id: str, email: str) -> Account:
        """Return the stored account, inserting a Free account on first sight."""

        account = Account(account_id=account_id, email=email)
        with get_conn(self._path) as conn:
            conn.execute(
                f"INSERT OR IGNORE INTO accounts ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    account.account_id,
                    account.email,
                    account.plan,
                    None,
                    None,
                    to_db_time(account.created_at),
                    to_db_time(account.updated_at),
                ),
            )
        stored = self.get(account_id)
        if stored is None:
            raise StorageError()
        return stored

    def list(self) -> List[Account]:
        with get_conn(self._path) as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM accounts ORDER BY created_at DESC, account_id"
            ).fetchall()
        return [_row_to_account(row) for row in rows]

    def set_plan(self, account_id: str, plan: Plan) -> Optional[Account]:
        with get_conn(self._path) as conn:
            cur = conn.execute(
                "UPDATE accounts SET plan = ?, updated_at = ? WHERE account_id = ?",
                (plan, to_db_time(utc_now()), account_id),
            )
            if cur.rowcount == 0:
                return None
        return self.get(account_id)

    def delete(self, account_id: str) -> bool:
        with get_conn(self._path) as conn:
            cur = conn.execute("DELETE FROM accounts WHERE account_id = ?", (account_id,))
            return cur.rowcount > 0


__all__ = ["AccountStore"]
