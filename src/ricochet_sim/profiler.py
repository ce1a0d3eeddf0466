# MIT License (see LICENSE)
"""
Lightweight instrumentation for the impact pipeline.

Times the pipeline stages (geometry, classify, solve) and tallies
outcomes per kind, without external dependencies.

Example:
    profiler = ImpactProfiler()
    orchestrator = ImpactOrchestrator(motion, catalog, profiler=profiler)
    ...
    print(profiler.stats.summary())
"""
from __future__ import annotations
import time
from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

from .types import OutcomeKind


@dataclass
class ImpactStats:
    """
    Timing samples per named stage and outcome counts per kind.
    """
    samples: dict[str, list[float]] = field(default_factory=dict)
    outcomes: Counter = field(default_factory=Counter)

    def add(self, name: str, dt: float) -> None:
        """Record a timing sample (in seconds) for a named stage."""
        self.samples.setdefault(name, []).append(dt)

    def count(self, kind: OutcomeKind) -> None:
        self.outcomes[kind.value] += 1

    def summary(self) -> dict[str, dict[str, float]]:
        """
        Per-stage statistics plus an "outcomes" entry.

        Returns:
            Dict mapping stage name to {'n', 'mean_ms', 'max_ms'}, and
            'outcomes' to the count of each outcome kind.
        """
        out: dict[str, dict[str, float]] = {}
        for name, times in self.samples.items():
            out[name] = {
                "n": len(times),
                "mean_ms": 1e3 * sum(times) / len(times),
                "max_ms": 1e3 * max(times),
            }
        out["outcomes"] = {kind.value: self.outcomes.get(kind.value, 0) for kind in OutcomeKind}
        return out


class ImpactProfiler:
    """Context-manager based stage timer."""

    def __init__(self) -> None:
        self.stats = ImpactStats()

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.stats.add(name, time.perf_counter() - t0)
