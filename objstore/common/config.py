from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

ENV_FILE = Path(".env")

SUPPORTED_SCHEMES: tuple[str, ...] = ("http", "https")


def _load_env_file() -> None:
    if not ENV_FILE.exists():
        return
    for raw_line in ENV_FILE.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y", "on"}


def _as_optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass
class Settings:
    S3_BUCKET: str = ""
    S3_REGION: str = "s3.amazonaws.com"
    S3_SCHEME: str = "https"
    S3_ACCESS_KEY_ID: str | None = None
    S3_SECRET_ACCESS_KEY: str | None = None
    S3_TIMEOUT: float = 30.0
    LOG_LEVEL: str = "INFO"
    ENABLE_METRICS: bool = True

    def __post_init__(self) -> None:
        self.S3_SCHEME = self.S3_SCHEME.strip().lower()
        if self.S3_SCHEME not in SUPPORTED_SCHEMES:
            raise ValueError(
                f"S3_SCHEME must be one of {', '.join(SUPPORTED_SCHEMES)}, "
                f"got {self.S3_SCHEME!r}."
            )
        if self.S3_TIMEOUT < 0:
            raise ValueError("S3_TIMEOUT must not be negative.")

    @property
    def endpoint_url(self) -> str:
        return f"{self.S3_SCHEME}://{self.S3_REGION}"

    @property
    def request_timeout(self) -> float | None:
        # 0 disables the timeout entirely.
        return self.S3_TIMEOUT or None

    @classmethod
    def from_environment(cls) -> "Settings":
        _load_env_file()
        return cls(
            S3_BUCKET=os.environ.get("S3_BUCKET", cls.S3_BUCKET).strip(),
            S3_REGION=os.environ.get("S3_REGION", cls.S3_REGION).strip(),
            S3_SCHEME=os.environ.get("S3_SCHEME", cls.S3_SCHEME),
            S3_ACCESS_KEY_ID=_as_optional(os.environ.get("S3_ACCESS_KEY_ID")),
            S3_SECRET_ACCESS_KEY=_as_optional(os.environ.get("S3_SECRET_ACCESS_KEY")),
            S3_TIMEOUT=float(os.environ.get("S3_TIMEOUT", cls.S3_TIMEOUT)),
            LOG_LEVEL=os.environ.get("LOG_LEVEL", cls.LOG_LEVEL).upper(),
            ENABLE_METRICS=_as_bool(
                os.environ.get("ENABLE_METRICS"), cls.ENABLE_METRICS
            ),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_environment()
