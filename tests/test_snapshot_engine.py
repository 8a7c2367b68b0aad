"""Tests for per-shot snapshot accumulation."""

import numpy as np
import pytest

from conftest import accumulate, make_shot
from quantum_snapshot_stats.core.engine_options import EngineOptions
from quantum_snapshot_stats.core.snapshot_engine import SnapshotEngine
from quantum_snapshot_stats.exceptions import DimensionMismatchError
from quantum_snapshot_stats.simulation.circuit_descriptor import CircuitDescriptor


class TestRunAccounting:
    def test_shots_and_counts(self):
        engine = SnapshotEngine(EngineOptions(show_memory=True))
        engine.compute_results(None, make_shot({}, outcome="01"))
        engine.compute_results(None, make_shot({}, outcome="01"))
        engine.compute_results(None, make_shot({}, outcome="11"))

        assert engine.total_shots == 3
        assert engine.counts == {"01": 2, "11": 1}
        assert engine.memory == ["01", "01", "11"]

    def test_shot_without_snapshots_only_counts(self, all_outputs):
        engine = SnapshotEngine(all_outputs)
        engine.compute_results(None, make_shot({}))
        assert engine.total_shots == 1
        assert engine.snapshots_ket == []
        assert engine.snapshots_density == {}


class TestDensityAccumulation:
    def test_first_contribution_initializes_shape(self):
        engine = SnapshotEngine(EngineOptions(show_snapshots_density=True))
        assert 0 not in engine.snapshots_density
        accumulate(engine, [{0: [0, 1]}])
        assert engine.snapshots_density[0].shape == (2, 2)

    def test_linearity(self, random_states):
        v1, v2 = random_states(2)
        engine = accumulate(SnapshotEngine(EngineOptions(show_snapshots_density=True)), [{3: v1}, {3: v2}])
        expected = np.outer(v1, v1.conj()) + np.outer(v2, v2.conj())
        np.testing.assert_allclose(engine.snapshots_density[3], expected)

    def test_sums_are_not_normalized(self):
        engine = accumulate(
            SnapshotEngine(EngineOptions(show_snapshots_density=True)),
            [{0: [1, 0]}, {0: [1, 0]}, {0: [1, 0]}],
        )
        assert engine.snapshots_density[0][0, 0] == pytest.approx(3.0)

    def test_shape_change_under_same_key_raises(self):
        engine = accumulate(SnapshotEngine(EngineOptions(show_snapshots_density=True)), [{0: [1, 0]}])
        with pytest.raises(DimensionMismatchError):
            engine.compute_results(None, make_shot({0: [1, 0, 0, 0]}))


class TestProbabilityAccumulation:
    def test_probability_vector_sum(self):
        engine = accumulate(
            SnapshotEngine(EngineOptions(show_snapshots_probs=True)),
            [{0: [1, 0]}, {0: [0, 1]}, {0: [0.6, 0.8j]}],
        )
        np.testing.assert_allclose(engine.snapshots_probs[0], [1.36, 1.64])

    def test_probability_ket_union(self):
        engine = accumulate(
            SnapshotEngine(EngineOptions(show_snapshots_probs_ket=True)),
            [{0: [1, 0, 0, 0]}, {0: [0, 0, 0, 1]}, {0: [1, 0, 0, 0]}],
        )
        assert engine.snapshots_probs_ket[0] == {"00": pytest.approx(2.0), "11": pytest.approx(1.0)}
        assert engine.snapshots_ket == []

    def test_keys_accumulate_independently(self):
        engine = accumulate(
            SnapshotEngine(EngineOptions(show_snapshots_probs=True)),
            [{0: [1, 0], 1: [0, 1]}, {1: [0, 1]}],
        )
        np.testing.assert_allclose(engine.snapshots_probs[0], [1, 0])
        np.testing.assert_allclose(engine.snapshots_probs[1], [0, 2])


class TestKetHistory:
    def test_one_entry_per_shot_in_order(self):
        engine = accumulate(
            SnapshotEngine(EngineOptions(show_snapshots_ket=True)),
            [{0: [1, 0]}, {0: [0, 1j]}],
        )
        assert engine.snapshots_ket == [{0: {"0": 1}}, {0: {"1": 1j}}]

    def test_circuit_registers_label_kets(self):
        circuit = CircuitDescriptor(qubit_sizes=(("a", 1), ("b", 2)))
        vec = np.zeros(8)
        vec[1] = 1.0  # qubit 0, the single qubit of register "a"
        engine = accumulate(SnapshotEngine(EngineOptions(show_snapshots_ket=True)), [{0: vec}], circuit=circuit)
        assert engine.snapshots_ket == [{0: {"00 1": 1}}]


class TestTargetStates:
    def test_inner_products_kept_per_shot(self, all_outputs):
        engine = SnapshotEngine(all_outputs)
        bell = np.array([1, 0, 0, 1]) / np.sqrt(2)
        accumulate(engine, [{0: bell}, {0: [1, 0, 0, 0]}])

        history = engine.snapshots_inprods[0]
        assert len(history) == 2
        np.testing.assert_allclose(history[0], [1.0, 1 / np.sqrt(2)])
        np.testing.assert_allclose(history[1], [1 / np.sqrt(2), 1.0])

    def test_overlaps_are_summed(self, all_outputs):
        engine = SnapshotEngine(all_outputs)
        bell = np.array([1, 0, 0, 1]) / np.sqrt(2)
        accumulate(engine, [{0: bell}, {0: [1, 0, 0, 0]}])
        np.testing.assert_allclose(engine.snapshots_overlaps[0], [1.5, 1.5])

    def test_inner_product_convention(self):
        target = np.array([1, 1j]) / np.sqrt(2)
        engine = SnapshotEngine(EngineOptions(show_snapshots_inner_product=True, target_states=[target]))
        accumulate(engine, [{0: [0, 1]}])
        # <target|psi> conjugates the target
        np.testing.assert_allclose(engine.snapshots_inprods[0][0], [-1j / np.sqrt(2)])

    def test_inner_products_are_chopped(self):
        target = np.array([1, 0])
        engine = SnapshotEngine(EngineOptions(show_snapshots_inner_product=True, target_states=[target]))
        accumulate(engine, [{0: [1e-12, 1]}])
        assert engine.snapshots_inprods[0][0][0] == 0

    def test_no_targets_skips_comparison(self):
        engine = accumulate(
            SnapshotEngine(EngineOptions(show_snapshots_inner_product=True, show_snapshots_overlaps=True)),
            [{0: [1, 0]}],
        )
        assert engine.snapshots_inprods == {}
        assert engine.snapshots_overlaps == {}

    def test_dimension_mismatch_keeps_density(self):
        options = EngineOptions(
            show_snapshots_density=True,
            show_snapshots_inner_product=True,
            target_states=[np.array([1, 0, 0])],
        )
        engine = SnapshotEngine(options)
        psi = np.array([1, 0, 0, 0], dtype=complex)

        with pytest.raises(DimensionMismatchError) as excinfo:
            engine.compute_results(None, make_shot({0: psi}))

        assert '"3"' in str(excinfo.value)
        assert '"4"' in str(excinfo.value)
        np.testing.assert_allclose(engine.snapshots_density[0], np.outer(psi, psi))
        assert engine.snapshots_inprods == {}
        assert engine.total_shots == 1
