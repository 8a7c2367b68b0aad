"""Shot and measurement-count bookkeeping shared by all engines."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Dict, List, Optional, Protocol, Mapping

import numpy as np

logger = logging.getLogger(__name__)


class ShotBackend(Protocol):
    """What an engine reads from a simulation backend after each shot."""

    @property
    def state_vector(self) -> np.ndarray: ...

    @property
    def snapshots(self) -> Mapping[int, np.ndarray]: ...

    @property
    def classical_outcome(self) -> Optional[str]: ...


class RunAccounting:
    """Counts shots and classical-register outcomes.

    ``total_shots`` is the normaliser for every averaged statistic exported by
    derived engines.
    """

    def __init__(self, show_counts: bool = True, show_memory: bool = False) -> None:
        self.show_counts = show_counts
        self.show_memory = show_memory
        self.total_shots = 0
        self.counts: Counter = Counter()
        self.memory: List[str] = []

    def compute_results(self, circuit: Any, backend: ShotBackend) -> None:
        """Record one finished shot."""
        self.total_shots += 1
        outcome = backend.classical_outcome
        if outcome is None:
            return
        self.counts[outcome] += 1
        if self.show_memory:
            self.memory.append(outcome)

    def add(self, other: "RunAccounting") -> None:
        """Fold another accumulator's shots, counts and memory into this one."""
        self.total_shots += other.total_shots
        self.counts.update(other.counts)
        self.memory.extend(other.memory)

    def export(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"shots": self.total_shots}
        if self.show_counts and self.counts:
            result["counts"] = dict(sorted(self.counts.items()))
        if self.show_memory and self.memory:
            result["memory"] = list(self.memory)
        return result
