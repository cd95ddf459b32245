import pathlib
import sys

import pytest

p = str(pathlib.Path(__file__).resolve().parents[1])
sys.path.insert(0, p) if p not in sys.path else None

from impot.config import get_settings  # noqa: E402

_IMPOT_ENV = (
    "IMPOT_TAX_FILE",
    "IMPOT_TAX_YEAR",
    "IMPOT_DEFAULT_TAX_YEAR",
    "IMPOT_REVERSE_TOLERANCE",
    "IMPOT_REVERSE_MAX_ITERATIONS",
    "IMPOT_LOG_LEVEL",
    "IMPOT_CURRENCY",
)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    # Settings read the environment once and are cached.
    for key in _IMPOT_ENV:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
