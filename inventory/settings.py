"""
Application settings.

Defaults live in DEFAULT_SETTINGS; each can be overridden with a
SENSOR_STOCK_<KEY> environment variable.
"""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

from gs1_decoder import SerialProfile

from .models import DEFAULT_PRODUCT_TYPE


DEFAULT_SETTINGS: Dict[str, Any] = {
    "serial_profile": SerialProfile.FIXED.value,
    "product_type": DEFAULT_PRODUCT_TYPE,
    "near_expiry_months": 1,
}

ENV_PREFIX = "SENSOR_STOCK_"


def _coerce(key: str, raw: str) -> Any:
    default = DEFAULT_SETTINGS[key]
    if isinstance(default, int):
        try:
            return int(raw)
        except ValueError as exc:
            raise ValueError(f"{ENV_PREFIX}{key.upper()} must be an integer, got {raw!r}") from exc
    return raw


def load_settings(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    environ = os.environ if environ is None else environ
    settings = {}
    for key, default in DEFAULT_SETTINGS.items():
        raw = environ.get(ENV_PREFIX + key.upper())
        settings[key] = default if raw in (None, "") else _coerce(key, raw)
    # Fail early on a profile name the decoder would reject
    settings["serial_profile"] = SerialProfile(settings["serial_profile"]).value
    return settings
