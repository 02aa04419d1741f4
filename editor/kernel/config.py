"""
Editor kernel configuration — environment variables in one place.

Read from environment at import time. Every value has a safe default so the
kernel works with no configuration at all.
"""

from __future__ import annotations

import os

from editor.kernel.types import TIERS

# Id suffix bounds; uuid4().hex has 32 characters
MIN_ID_SUFFIX_LENGTH = 4
MAX_ID_SUFFIX_LENGTH = 32


def _int_env(name: str, default: int, minimum: int | None = None, maximum: int | None = None) -> int:
    raw = os.environ.get(name, "")
    try:
        value = int(raw) if raw else default
    except ValueError:
        return default
    if minimum is not None:
        value = max(minimum, value)
    if maximum is not None:
        value = min(maximum, value)
    return value


def _tier_env(name: str, default: str) -> str:
    value = os.environ.get(name, "")
    return value if value in TIERS else default


class Settings:
    """Kernel settings from environment variables."""

    # History
    HISTORY_LIMIT: int = _int_env("EDITOR_HISTORY_LIMIT", 50, minimum=1)

    # Node ids: "<type-slug>-<hex suffix>"
    ID_SUFFIX_LENGTH: int = _int_env("EDITOR_ID_SUFFIX_LENGTH", 8, MIN_ID_SUFFIX_LENGTH, MAX_ID_SUFFIX_LENGTH)

    # Viewport tier a new session starts in
    DEFAULT_TIER: str = _tier_env("EDITOR_DEFAULT_TIER", "desktop")


settings = Settings()
