"""Top-level package for shot-averaged quantum snapshot statistics."""

from .core import EngineOptions, SnapshotEngine
from .simulation import CircuitDescriptor, StatevectorShotBackend, merge_engines, run_shots

__all__ = [
    "EngineOptions",
    "SnapshotEngine",
    "CircuitDescriptor",
    "StatevectorShotBackend",
    "merge_engines",
    "run_shots",
]
