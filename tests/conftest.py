import os
import sys
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import LlmRoute
from config.settings import settings
from storage.migrate import migrate


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    monkeypatch.setattr(settings, "MEDIA_DIR", os.path.join(td.name, "media"), raising=False)
    migrate(db_path)
    try:
        yield db_path
    finally:
        td.cleanup()


@pytest.fixture
def route():
    return LlmRoute(
        name="test",
        base_url="http://llm.local",
        endpoint="/v1/chat/completions",
        model="test-model",
        timeout_s=1.0,
        max_retries=1,
    )


@pytest.fixture
def mid_october():
    return datetime(2026, 10, 15, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock for deterministic timing tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()
