"""Shared fixtures for snapshot engine tests."""

from __future__ import annotations

from types import SimpleNamespace

import numpy as np
import pytest

from quantum_snapshot_stats.core.engine_options import EngineOptions
from quantum_snapshot_stats.core.snapshot_engine import SnapshotEngine


def make_shot(snapshots, outcome=None):
    """A finished shot as seen by the engine."""
    snapshots = {key: np.asarray(vec, dtype=complex) for key, vec in snapshots.items()}
    last = next(reversed(snapshots.values())) if snapshots else np.zeros(0, dtype=complex)
    return SimpleNamespace(state_vector=last, snapshots=snapshots, classical_outcome=outcome)


def accumulate(engine, shots, circuit=None):
    for snapshots in shots:
        engine.compute_results(circuit, make_shot(snapshots))
    return engine


@pytest.fixture
def all_outputs():
    bell = np.array([1, 0, 0, 1]) / np.sqrt(2)
    return EngineOptions(
        show_snapshots_ket=True,
        show_snapshots_density=True,
        show_snapshots_probs=True,
        show_snapshots_probs_ket=True,
        show_snapshots_inner_product=True,
        show_snapshots_overlaps=True,
        target_states=[bell, np.array([1, 0, 0, 0])],
    )


@pytest.fixture
def random_states():
    rng = np.random.default_rng(1234)

    def _draw(count, size=4):
        states = rng.normal(size=(count, size)) + 1j * rng.normal(size=(count, size))
        return [vec / np.linalg.norm(vec) for vec in states]

    return _draw


@pytest.fixture
def engine_factory(all_outputs):
    def _make(shots=()):
        return accumulate(SnapshotEngine(all_outputs), shots)

    return _make
