"""Reduction of complex amplitudes to Z-basis probabilities."""

from __future__ import annotations

from typing import Mapping, Union

import numpy as np


def amplitude_probability(amplitude: complex) -> float:
    """Squared magnitude of a single amplitude."""
    z = complex(amplitude)
    return z.real * z.real + z.imag * z.imag


def vector_probabilities(vector) -> np.ndarray:
    """Element-wise squared magnitudes of a dense vector, order preserved."""
    vec = np.asarray(vector)
    return (vec.real * vec.real + vec.imag * vec.imag).astype(float)


def ket_probabilities(ket: Mapping[str, complex]) -> dict[str, float]:
    """Squared magnitudes of a sparse ket, keys preserved."""
    return {label: amplitude_probability(amp) for label, amp in ket.items()}


def probabilities(value) -> Union[float, np.ndarray, dict[str, float]]:
    """Dispatch to the scalar, dense or ket form depending on ``value``."""
    if isinstance(value, Mapping):
        return ket_probabilities(value)
    if isinstance(value, (np.ndarray, list, tuple)):
        return vector_probabilities(value)
    return amplitude_probability(value)
