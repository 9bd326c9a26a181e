"""
execution_poller.config — Poller settings and placeholder validation.

Resolution order per setting: explicit override (CLI flag) > process
environment > .env.local / .env in the working directory > default.
Credentials default to placeholder strings so an unconfigured run fails
fast in validate() before any network call.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from execution_poller.exceptions import ConfigurationError

DEFAULT_ENDPOINT = "https://cloud.appwrite.io/v1"
DEFAULT_PATH = "/test"
DEFAULT_BODY = '{"test": true}'
DEFAULT_INITIAL_DELAY_SECONDS = 1.0
DEFAULT_INTERVAL_SECONDS = 2.0
DEFAULT_TIMEOUT_SECONDS = 60.0

PLACEHOLDERS: dict[str, str] = {
    "endpoint": "YOUR_APPWRITE_ENDPOINT",
    "project_id": "YOUR_PROJECT_ID",
    "function_id": "YOUR_FUNCTION_ID",
    "api_key": "YOUR_API_KEY",
}

_ENV_NAMES: dict[str, str] = {
    "endpoint": "APPWRITE_ENDPOINT",
    "project_id": "APPWRITE_PROJECT_ID",
    "function_id": "APPWRITE_FUNCTION_ID",
    "api_key": "APPWRITE_API_KEY",
    "initial_delay_seconds": "POLL_INITIAL_DELAY_SECONDS",
    "interval_seconds": "POLL_INTERVAL_SECONDS",
    "timeout_seconds": "POLL_TIMEOUT_SECONDS",
}


@dataclass(frozen=True)
class PollerSettings:
    endpoint: str = DEFAULT_ENDPOINT
    project_id: str = PLACEHOLDERS["project_id"]
    function_id: str = PLACEHOLDERS["function_id"]
    api_key: str = PLACEHOLDERS["api_key"]
    initial_delay_seconds: float = DEFAULT_INITIAL_DELAY_SECONDS
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def unresolved(self) -> list[str]:
        """Names of credential settings that are empty or still placeholders."""
        missing: list[str] = []
        for name, placeholder in PLACEHOLDERS.items():
            value = str(getattr(self, name)).strip()
            if not value or value == placeholder:
                missing.append(name)
        return missing

    def validate(self) -> PollerSettings:
        missing = self.unresolved()
        if missing:
            raise ConfigurationError(missing)
        for name in ("initial_delay_seconds", "interval_seconds", "timeout_seconds"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        return self

    def with_overrides(self, **overrides: Any) -> PollerSettings:
        """Return a copy with every non-None override applied."""
        applied = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **applied)


def load_dotenv_values(directory: Path | None = None) -> dict[str, str]:
    values: dict[str, str] = {}
    root = directory or Path.cwd()
    # .env.local wins over .env, so read it last.
    for filename in (".env", ".env.local"):
        path = root / filename
        if not path.exists():
            continue
        for line in path.read_text(encoding="utf-8").splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or "=" not in stripped:
                continue
            key, raw = stripped.split("=", 1)
            key = key.strip()
            if key:
                values[key] = raw.strip().strip('"').strip("'")
    return values


def load_settings(
    environ: dict[str, str] | None = None,
    *,
    dotenv_dir: Path | None = None,
) -> PollerSettings:
    """Build settings from the environment, falling back to .env files."""
    env = dict(os.environ) if environ is None else dict(environ)
    dotenv = load_dotenv_values(dotenv_dir)

    def _lookup(name: str) -> str | None:
        env_name = _ENV_NAMES[name]
        value = env.get(env_name) or dotenv.get(env_name)
        return value.strip() if value and value.strip() else None

    overrides: dict[str, Any] = {}
    for name in ("endpoint", "project_id", "function_id", "api_key"):
        overrides[name] = _lookup(name)
    for name in ("initial_delay_seconds", "interval_seconds", "timeout_seconds"):
        raw = _lookup(name)
        if raw is None:
            continue
        try:
            overrides[name] = float(raw)
        except ValueError as exc:
            raise ValueError(f"{_ENV_NAMES[name]} must be a number, got {raw!r}") from exc
    return PollerSettings().with_overrides(**overrides)
