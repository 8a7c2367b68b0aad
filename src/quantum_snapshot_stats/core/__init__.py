"""Snapshot statistics primitives."""

from .engine_options import EngineOptions
from .ket_encoder import vector_to_ket
from .probabilities import (
    amplitude_probability,
    ket_probabilities,
    probabilities,
    vector_probabilities,
)
from .run_accounting import RunAccounting, ShotBackend
from .snapshot_engine import SnapshotEngine
from .truncation import chop

__all__ = [
    "EngineOptions",
    "RunAccounting",
    "ShotBackend",
    "SnapshotEngine",
    "vector_to_ket",
    "amplitude_probability",
    "vector_probabilities",
    "ket_probabilities",
    "probabilities",
    "chop",
]
