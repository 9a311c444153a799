import os
import sys
import tempfile
from datetime import UTC, datetime
from pathlib import Path

import pytest

_src = Path(__file__).resolve().parent.parent / "src"
if str(_src) not in sys.path:
    sys.path.insert(0, str(_src))

# Config is read at import time, so the environment has to be set up first
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="kanban_metrics_logs_"))
os.environ.setdefault("LOG_OUTPUT", "console")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import log_config  # noqa: E402,F401


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=UTC)


@pytest.fixture
def horizon() -> datetime:
    # A Monday
    return utc(2024, 1, 1)
