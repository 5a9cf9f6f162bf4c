"""Environment helpers for runtime configuration."""

import os
from functools import lru_cache


@lru_cache
def is_dev_mode() -> bool:
    """Return True when the exporter runs in development mode."""
    value = os.environ.get("PLANTDBG_ENV") or os.environ.get("PLANTDBG_DEV_MODE")
    if not value:
        return False
    normalized = value.strip().lower()
    return normalized in {"dev", "development", "1", "true", "yes"}


def is_perf_debug() -> bool:
    """Return True when ``@timed`` should log execution times."""
    return os.environ.get("PLANTDBG_PERF_DEBUG", "0").strip() == "1"


__all__ = ["is_dev_mode", "is_perf_debug"]
