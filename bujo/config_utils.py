"""Env readers for BujoConfig.

Blank values count as unset. Values that do not parse fall back to the
default rather than failing app start-up.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

_TRUE = {"1", "true", "yes", "y", "on"}
_FALSE = {"0", "false", "no", "n", "off"}


def _raw(name: str) -> Optional[str]:
    value = os.environ.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def env_str(name: str, default: str) -> str:
    return _raw(name) or default


def env_optional_str(name: str) -> Optional[str]:
    return _raw(name)


def env_bool(name: str, default: bool) -> bool:
    raw = _raw(name)
    if raw is None:
        return default
    raw = raw.lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    return default


def env_int(name: str, default: int, *, minimum: Optional[int] = None) -> int:
    raw = _raw(name)
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        value = default
    if minimum is not None and value < minimum:
        return minimum
    return value


def env_positive_float(name: str, default: float) -> float:
    raw = _raw(name)
    try:
        value = float(raw) if raw is not None else default
    except ValueError:
        return default
    return value if value > 0 else default


def env_path(name: str, default: str) -> Path:
    return Path(env_str(name, default)).expanduser()
