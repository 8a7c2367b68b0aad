"""Output toggles and numerical settings of the snapshot engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

import numpy as np

from ..exceptions import InvalidOptionError
from .ket_encoder import MAX_QUDIT_DIM

logger = logging.getLogger(__name__)

DEFAULT_EPSILON = 1e-10
DEFAULT_QUDIT_DIM = 2

# Recognised names in the ``data`` list, after lower-casing and stripping.
DATA_TOGGLES = {
    "quantumstateket": "show_snapshots_ket",
    "quantumstatesket": "show_snapshots_ket",
    "densitymatrix": "show_snapshots_density",
    "probabilities": "show_snapshots_probs",
    "probs": "show_snapshots_probs",
    "probabilitiesket": "show_snapshots_probs_ket",
    "probsket": "show_snapshots_probs_ket",
    "targetstatesinner": "show_snapshots_inner_product",
    "targetstatesprobs": "show_snapshots_overlaps",
}


def parse_state_vector(raw: Any, option: str = "target_states") -> np.ndarray:
    """Parse a vector whose entries are numbers or ``[real, imag]`` pairs."""
    if isinstance(raw, np.ndarray):
        return np.asarray(raw, dtype=complex).ravel()
    try:
        amplitudes = []
        for entry in raw:
            if isinstance(entry, (list, tuple)):
                if len(entry) != 2:
                    raise ValueError("complex entries must be [real, imag] pairs")
                amplitudes.append(complex(float(entry[0]), float(entry[1])))
            else:
                amplitudes.append(complex(entry))
    except (TypeError, ValueError) as exc:
        raise InvalidOptionError(option, raw, str(exc)) from exc
    if not amplitudes:
        raise InvalidOptionError(option, raw, "state vector is empty")
    return np.asarray(amplitudes, dtype=complex)


def renormalize(vector: np.ndarray) -> np.ndarray:
    """Return ``vector`` scaled to unit norm (zero vectors are returned unchanged)."""
    norm = np.linalg.norm(vector)
    if norm == 0.0:
        logger.warning("Cannot renormalize a zero-norm target state; leaving it unchanged.")
        return vector
    return vector / norm


@dataclass
class EngineOptions:
    """Configuration surface of :class:`SnapshotEngine`.

    Attributes:
        epsilon: Chop threshold for truncation and ket sparsity.
        qudit_dim: Radix used to label ket basis states.
        show_snapshots_*: Six independent output toggles.
        target_states: Read-only vectors compared against every snapshot.
        show_counts: Export measurement counts.
        show_memory: Record and export every shot's classical outcome.
    """

    epsilon: float = DEFAULT_EPSILON
    qudit_dim: int = DEFAULT_QUDIT_DIM
    show_snapshots_ket: bool = False
    show_snapshots_density: bool = False
    show_snapshots_probs: bool = False
    show_snapshots_probs_ket: bool = False
    show_snapshots_inner_product: bool = False
    show_snapshots_overlaps: bool = False
    target_states: List[np.ndarray] = field(default_factory=list)
    show_counts: bool = True
    show_memory: bool = False

    def __post_init__(self) -> None:
        self.epsilon = float(self.epsilon)
        if not self.epsilon > 0:
            raise InvalidOptionError("chop", self.epsilon, "must be positive")
        try:
            qudit_dim = int(self.qudit_dim)
        except (TypeError, ValueError) as exc:
            raise InvalidOptionError("qudit_dim", self.qudit_dim, "must be an integer") from exc
        if isinstance(self.qudit_dim, bool) or qudit_dim != self.qudit_dim:
            raise InvalidOptionError("qudit_dim", self.qudit_dim, "must be an integer")
        self.qudit_dim = qudit_dim
        if not 2 <= self.qudit_dim <= MAX_QUDIT_DIM:
            raise InvalidOptionError("qudit_dim", self.qudit_dim, f"must be between 2 and {MAX_QUDIT_DIM}")
        frozen = []
        for state in self.target_states:
            vec = np.array(state, dtype=complex).ravel()
            vec.setflags(write=False)
            frozen.append(vec)
        self.target_states = frozen

    @property
    def ket_form(self) -> bool:
        return self.show_snapshots_ket or self.show_snapshots_probs_ket

    @property
    def compare_targets(self) -> bool:
        return bool(self.target_states) and (
            self.show_snapshots_inner_product or self.show_snapshots_overlaps
        )

    @classmethod
    def from_settings(cls, settings: Optional[Mapping[str, Any]] = None) -> "EngineOptions":
        """Build options from a settings document.

        Unknown names in ``data`` are ignored. Target states are renormalized
        unless ``renorm_target_states`` is false.
        """
        settings = settings or {}
        toggles = {}
        data = settings.get("data") or []
        if isinstance(data, str):
            data = [data]
        for name in data:
            key = str(name).strip().lower()
            attr = DATA_TOGGLES.get(key)
            if attr is None:
                logger.debug("Ignoring unrecognised data option '%s'", name)
                continue
            toggles[attr] = True

        try:
            epsilon = float(settings.get("chop", DEFAULT_EPSILON))
        except (TypeError, ValueError) as exc:
            raise InvalidOptionError("chop", settings.get("chop"), "must be a number") from exc

        raw_targets = settings.get("target_states")
        targets = [parse_state_vector(raw) for raw in raw_targets or []]
        if raw_targets and settings.get("renorm_target_states", True):
            targets = [renormalize(vec) for vec in targets]

        return cls(
            epsilon=epsilon,
            qudit_dim=settings.get("qudit_dim", DEFAULT_QUDIT_DIM),
            target_states=targets,
            show_counts=bool(settings.get("show_counts", True)),
            show_memory=bool(settings.get("show_memory", False)),
            **toggles,
        )
