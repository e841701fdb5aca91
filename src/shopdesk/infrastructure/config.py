"""Runtime settings, read from the environment.

The CLI calls ``load_dotenv()`` first, so a local ``.env`` file can supply
any of these:

  SHOPDESK_BASE_URL          API root (default: the production shop API)
  SHOPDESK_SESSION_COOKIE    Cookie header from the login flow, e.g. "token=..."
  SHOPDESK_POLL_INTERVAL     seconds between syncs (default 10)
  SHOPDESK_REQUEST_TIMEOUT   per-request timeout in seconds (default 15)
  SHOPDESK_ALERT_SOUND       on/off (default on)
  SHOPDESK_ALERT_VIBRATION   on/off (default on)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from shopdesk.domain.exceptions import ValidationError

DEFAULT_BASE_URL = "https://grokart-2.onrender.com/api/v1"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    base_url: str = DEFAULT_BASE_URL
    session_cookie: str | None = None
    poll_interval: float = 10.0
    request_timeout: float = 15.0
    alert_sound: bool = True
    alert_vibration: bool = True


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    return Settings(
        base_url=env.get("SHOPDESK_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        session_cookie=env.get("SHOPDESK_SESSION_COOKIE") or None,
        poll_interval=_positive_float(env, "SHOPDESK_POLL_INTERVAL", 10.0),
        request_timeout=_positive_float(env, "SHOPDESK_REQUEST_TIMEOUT", 15.0),
        alert_sound=_flag(env, "SHOPDESK_ALERT_SOUND", True),
        alert_vibration=_flag(env, "SHOPDESK_ALERT_VIBRATION", True),
    )


def _positive_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValidationError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {raw!r}")
    return value


def _flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValidationError(f"{name} must be on/off, got {raw!r}")
