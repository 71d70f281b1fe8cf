"""Environment-driven tuning knobs."""

from __future__ import annotations

import logging
import os


logger = logging.getLogger(__name__)

_LIVE_FORM_TTL_ENV = "PYXI_LIVE_FORM_TTL_DAYS"
_LIVE_FORM_TTL_DEFAULT = 7.0


def _env_float(name: str, default: float, *, clamp_min: float | None = None, clamp_max: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    if clamp_max is not None:
        value = min(clamp_max, value)
    return value


def live_form_ttl_days() -> float:
    """Days a non-permanent live form rating stays in effect."""

    return _env_float(_LIVE_FORM_TTL_ENV, _LIVE_FORM_TTL_DEFAULT, clamp_min=0.0)
