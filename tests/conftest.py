from __future__ import annotations

import pytest

from objstore.common import config
from objstore.common.config import get_settings

S3_ENV_VARS = (
    "S3_BUCKET",
    "S3_REGION",
    "S3_SCHEME",
    "S3_ACCESS_KEY_ID",
    "S3_SECRET_ACCESS_KEY",
    "S3_TIMEOUT",
    "LOG_LEVEL",
    "ENABLE_METRICS",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep the developer's environment and .env file out of the tests."""
    for name in S3_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "ENV_FILE", tmp_path / ".env")
    get_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]
