"""SQLite schema migrations."""
from __future__ import annotations

import os
import sqlite3
from typing import Iterable, Optional

from config.settings import settings

SCHEMA: Iterable[str] = [
    """
CREATE TABLE IF NOT EXISTS accounts (
  account_id TEXT PRIMARY KEY,
  email TEXT NOT NULL,
  plan TEXT NOT NULL DEFAULT 'Free',
  billing_customer_id TEXT,
  billing_subscription_id TEXT,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS interview_sessions (
  id TEXT PRIMARY KEY,
  mode TEXT NOT NULL,
  job_role TEXT NOT NULL,
  industry TEXT,
  experience TEXT NOT NULL,
  resume_text TEXT,
  job_description TEXT,
  questions_json TEXT NOT NULL,
  answers_json TEXT NOT NULL,
  feedback_json TEXT NOT NULL,
  ideal_answers_json TEXT NOT NULL,
  overall_feedback TEXT,
  score INTEGER,
  status TEXT NOT NULL,
  account_id TEXT NOT NULL,
  email TEXT,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);
""",
    """
CREATE INDEX IF NOT EXISTS idx_interview_sessions_account_created
  ON interview_sessions (account_id, created_at);
""",
    """
CREATE TABLE IF NOT EXISTS scheduled_mocks (
  id TEXT PRIMARY KEY,
  account_id TEXT NOT NULL,
  email TEXT NOT NULL,
  scheduled_for TEXT NOT NULL,
  mode TEXT,
  job_role TEXT,
  industry TEXT,
  experience TEXT,
  resume_text TEXT,
  job_description TEXT,
  reminder_stage TEXT NOT NULL DEFAULT 'unset',
  created_at TEXT NOT NULL
);
""",
]


def migrate(db_path: Optional[str] = None) -> None:
    """Apply schema migrations to the SQLite database."""

    db_path = db_path or settings.DB_PATH
    directory = os.path.dirname(db_path) or "."
    os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        for stmt in SCHEMA:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


if __name__ == "__main__":
    migrate()
