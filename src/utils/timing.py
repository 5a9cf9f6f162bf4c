"""Phase duration collection for export runs."""

from __future__ import annotations

from contextlib import contextmanager
from time import perf_counter
from typing import Any, Dict, Iterator, List, Optional


class PhaseTimer:
    """Collects wall-clock durations for named phases plus shared context."""

    def __init__(self, base_context: Optional[Dict[str, Any]] = None) -> None:
        self._base_context = dict(base_context or {})
        self._entries: List[Dict[str, Any]] = []

    def as_list(self) -> List[Dict[str, Any]]:
        return list(self._entries)

    def durations(self) -> Dict[str, float]:
        """Total duration per phase name."""
        totals: Dict[str, float] = {}
        for entry in self._entries:
            totals[entry["phase"]] = totals.get(entry["phase"], 0.0) + entry["duration"]
        return totals

    @contextmanager
    def measure(self, phase: str, extra: Optional[Dict[str, Any]] = None) -> Iterator[None]:
        """Record elapsed time for ``phase``, also when the block raises."""
        start = perf_counter()
        try:
            yield
        finally:
            entry: Dict[str, Any] = {"phase": phase, "duration": perf_counter() - start}
            entry.update(self._base_context)
            if extra:
                entry.update(extra)
            self._entries.append(entry)
