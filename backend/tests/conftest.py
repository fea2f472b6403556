import os

# Point the app at SQLite before anything imports the session module.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from datetime import datetime

import pytest

import allowance.utils.timezone as tz
from allowance.services import tracker as tracker_service


def freeze_today(monkeypatch, day: str):
    y, m, d = (int(x) for x in day.split("-"))
    monkeypatch.setattr(tz, "now_reference", lambda: datetime(y, m, d, 12, 0, tzinfo=tz.REFERENCE_TZ))


@pytest.fixture(autouse=True)
def _fresh_sessions():
    tracker_service.forget_all()
    yield
    tracker_service.forget_all()
