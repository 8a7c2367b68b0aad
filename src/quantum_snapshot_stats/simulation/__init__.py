"""Simulation collaborators feeding the snapshot engine."""

from .circuit_descriptor import CircuitDescriptor
from .shot_runner import merge_engines, run_shots
from .statevector_backend import StatevectorShotBackend, snapshot_keys

__all__ = [
    "CircuitDescriptor",
    "StatevectorShotBackend",
    "merge_engines",
    "run_shots",
    "snapshot_keys",
]
