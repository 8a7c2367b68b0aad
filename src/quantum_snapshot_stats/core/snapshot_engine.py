"""Shot-averaged statistics of snapshotted state vectors.

The engine accumulates, for every snapshot key captured by a circuit:

- the ket form of each shot's state (kept per shot),
- the density matrix averaged over shots,
- the Z-basis probabilities averaged over shots, as a dense vector and as a
  sparse ket,
- the inner products with a fixed list of target states (kept per shot),
- the overlaps with the target states averaged over shots.

Averaged quantities are stored as unnormalised sums and divided by the total
shot count only when exported. Engines built from disjoint shot batches can be
combined with :meth:`SnapshotEngine.add`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import numpy as np

from ..exceptions import DimensionMismatchError
from .engine_options import EngineOptions
from .ket_encoder import vector_to_ket
from .probabilities import ket_probabilities, vector_probabilities
from .run_accounting import RunAccounting, ShotBackend
from .truncation import chop_array, chop_mapping

logger = logging.getLogger(__name__)

Ket = Dict[str, complex]


def _accumulate(store: Dict[int, np.ndarray], key: int, contribution: np.ndarray, context: str) -> None:
    """Add ``contribution`` into ``store[key]``; an absent key takes a copy."""
    current = store.get(key)
    if current is None:
        store[key] = np.array(contribution, copy=True)
        return
    if current.shape != contribution.shape:
        raise DimensionMismatchError(current.shape[0], contribution.shape[0], context=context)
    store[key] = current + contribution


def _check_mergeable(store: Dict[int, np.ndarray], other: Dict[int, np.ndarray], context: str) -> None:
    """Raise if a key present in both stores holds arrays of different shapes."""
    for key, contribution in other.items():
        current = store.get(key)
        if current is not None and current.shape != contribution.shape:
            raise DimensionMismatchError(current.shape[0], contribution.shape[0], context=context)


def _accumulate_ket(store: Dict[int, Dict[str, float]], key: int, contribution: Mapping[str, float]) -> None:
    """Key-wise sum of label -> value maps, labels missing on either side count as zero."""
    current = store.setdefault(key, {})
    for label, value in contribution.items():
        current[label] = current.get(label, 0.0) + value


class SnapshotEngine(RunAccounting):
    """Accumulates snapshot statistics over shots.

    Not safe for concurrent mutation. Run independent engines on disjoint
    shot ranges and merge them with :meth:`add` instead.
    """

    def __init__(self, options: Optional[EngineOptions] = None) -> None:
        self.options = options or EngineOptions()
        super().__init__(show_counts=self.options.show_counts, show_memory=self.options.show_memory)

        self.snapshots_ket: List[Dict[int, Ket]] = []
        self.snapshots_density: Dict[int, np.ndarray] = {}
        self.snapshots_probs: Dict[int, np.ndarray] = {}
        self.snapshots_probs_ket: Dict[int, Dict[str, float]] = {}
        self.snapshots_inprods: Dict[int, List[np.ndarray]] = {}
        self.snapshots_overlaps: Dict[int, np.ndarray] = {}

    @classmethod
    def from_settings(cls, settings: Optional[Mapping[str, Any]] = None) -> "SnapshotEngine":
        return cls(EngineOptions.from_settings(settings))

    @property
    def epsilon(self) -> float:
        return self.options.epsilon

    # ------------------------------------------------------------------
    # Accumulation
    # ------------------------------------------------------------------

    def compute_results(self, circuit: Any, backend: ShotBackend) -> None:
        """Fold one shot's captured snapshots into the running totals.

        Args:
            circuit: Circuit descriptor; its ``ket_registers()`` orders ket
                labels. ``None`` labels kets as a single register.
            backend: Backend holding the finished shot.

        Raises:
            DimensionMismatchError: If a target state and a snapshot differ in
                length. Statistics accumulated before the comparison are kept.
        """
        super().compute_results(circuit, backend)

        opts = self.options
        captured = {int(key): np.asarray(vec, dtype=complex).ravel() for key, vec in backend.snapshots.items()}
        if not captured:
            return

        if opts.ket_form:
            registers = circuit.ket_registers() if circuit is not None else None
            kets = {
                key: vector_to_ket(psi, opts.qudit_dim, opts.epsilon, registers)
                for key, psi in captured.items()
            }
            if opts.show_snapshots_ket:
                self.snapshots_ket.append(kets)
            if opts.show_snapshots_probs_ket:
                for key, ket in kets.items():
                    _accumulate_ket(self.snapshots_probs_ket, key, ket_probabilities(ket))

        if opts.show_snapshots_density:
            for key, psi in captured.items():
                _accumulate(self.snapshots_density, key, np.outer(psi, psi.conj()), "density_matrix")

        if opts.show_snapshots_probs:
            for key, psi in captured.items():
                _accumulate(self.snapshots_probs, key, vector_probabilities(psi), "probabilities")

        if opts.compare_targets:
            for key, psi in captured.items():
                inprods = self.inner_products(psi)
                if opts.show_snapshots_inner_product:
                    self.snapshots_inprods.setdefault(key, []).append(inprods)
                if opts.show_snapshots_overlaps:
                    _accumulate(self.snapshots_overlaps, key, vector_probabilities(inprods), "overlaps")

    def inner_products(self, psi: np.ndarray) -> np.ndarray:
        """Chopped ``<target|psi>`` for every target state, in target order."""
        values = np.empty(len(self.options.target_states), dtype=complex)
        for idx, target in enumerate(self.options.target_states):
            if target.size != psi.size:
                raise DimensionMismatchError(psi.size, target.size, context="target_state")
            values[idx] = np.vdot(target, psi)
        return chop_array(values, self.epsilon)

    # ------------------------------------------------------------------
    # Merge
    # ------------------------------------------------------------------

    def add(self, other: "SnapshotEngine") -> None:
        """Merge another engine's accumulated results into this one, in place.

        Raises:
            DimensionMismatchError: If a snapshot key holds arrays of different
                shapes in the two engines. Neither engine is modified.
        """
        _check_mergeable(self.snapshots_density, other.snapshots_density, "density_matrix")
        _check_mergeable(self.snapshots_probs, other.snapshots_probs, "probabilities")
        _check_mergeable(self.snapshots_overlaps, other.snapshots_overlaps, "overlaps")

        super().add(other)

        self.snapshots_ket.extend(
            [{key: dict(ket) for key, ket in kets.items()} for kets in other.snapshots_ket]
        )

        for key, rho in other.snapshots_density.items():
            _accumulate(self.snapshots_density, key, rho, "density_matrix")
        for key, probs in other.snapshots_probs.items():
            _accumulate(self.snapshots_probs, key, probs, "probabilities")
        for key, probs_ket in other.snapshots_probs_ket.items():
            _accumulate_ket(self.snapshots_probs_ket, key, probs_ket)
        for key, overlaps in other.snapshots_overlaps.items():
            _accumulate(self.snapshots_overlaps, key, overlaps, "overlaps")
        for key, inprods in other.snapshots_inprods.items():
            self.snapshots_inprods.setdefault(key, []).extend([np.array(vals, copy=True) for vals in inprods])

        logger.debug("Merged engine with %d shots (total now %d)", other.total_shots, self.total_shots)

    def __iadd__(self, other: "SnapshotEngine") -> "SnapshotEngine":
        self.add(other)
        return self

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export(self) -> Dict[str, Any]:
        """Return normalised, chopped copies of the enabled statistics.

        Fields whose toggle is off or whose accumulator is empty are omitted.
        The engine itself is left untouched.
        """
        result = super().export()
        opts = self.options
        eps = opts.epsilon

        if self.total_shots:
            renorm = 1.0 / self.total_shots
        else:
            renorm = 1.0
            if self.snapshots_density or self.snapshots_probs or self.snapshots_probs_ket or self.snapshots_overlaps:
                logger.warning("Exporting merged statistics with zero recorded shots; sums are not averaged.")

        if opts.show_snapshots_ket and self.snapshots_ket:
            result["quantum_state_ket"] = [
                {key: chop_mapping(ket, eps) for key, ket in kets.items()} for kets in self.snapshots_ket
            ]

        if opts.show_snapshots_density and self.snapshots_density:
            result["density_matrix"] = {
                key: chop_array(rho * renorm, eps) for key, rho in sorted(self.snapshots_density.items())
            }

        if opts.show_snapshots_probs and self.snapshots_probs:
            result["probabilities"] = {
                key: chop_array(probs * renorm, eps) for key, probs in sorted(self.snapshots_probs.items())
            }

        if opts.show_snapshots_probs_ket and self.snapshots_probs_ket:
            result["probabilities_ket"] = {
                key: chop_mapping({label: val * renorm for label, val in probs.items()}, eps)
                for key, probs in sorted(self.snapshots_probs_ket.items())
            }

        if opts.show_snapshots_inner_product and self.snapshots_inprods:
            result["inner_products"] = {
                key: [chop_array(vals, eps) for vals in inprods]
                for key, inprods in sorted(self.snapshots_inprods.items())
            }

        if opts.show_snapshots_overlaps and self.snapshots_overlaps:
            result["overlaps"] = {
                key: chop_array(overlaps * renorm, eps) for key, overlaps in sorted(self.snapshots_overlaps.items())
            }

        return result
