"""Chopping of numerically negligible values.

Values whose magnitude falls below a threshold are replaced by exact zero.
For complex values the real and imaginary parts are chopped independently.
"""

from __future__ import annotations

from typing import Mapping, Union

import numpy as np

Number = Union[int, float, complex]


def chop_scalar(value: Number, epsilon: float) -> Number:
    """Return ``value`` with sub-threshold components set to zero."""
    if isinstance(value, (complex, np.complexfloating)):
        real = value.real if abs(value.real) >= epsilon else 0.0
        imag = value.imag if abs(value.imag) >= epsilon else 0.0
        return complex(real, imag)
    return float(value) if abs(value) >= epsilon else 0.0


def chop_array(values: np.ndarray, epsilon: float) -> np.ndarray:
    """Return a chopped copy of a real or complex array."""
    out = np.array(values, copy=True)
    if np.iscomplexobj(out):
        out.real[np.abs(out.real) < epsilon] = 0.0
        out.imag[np.abs(out.imag) < epsilon] = 0.0
    else:
        out[np.abs(out) < epsilon] = 0.0
    return out


def chop_mapping(values: Mapping[str, Number], epsilon: float) -> dict[str, Number]:
    """Return a chopped copy of a label -> value mapping (keys are kept)."""
    return {label: chop_scalar(val, epsilon) for label, val in values.items()}


def chop(value, epsilon: float):
    """Chop a scalar, array or mapping, whichever ``value`` is."""
    if isinstance(value, Mapping):
        return chop_mapping(value, epsilon)
    if isinstance(value, np.ndarray):
        return chop_array(value, epsilon)
    if isinstance(value, (list, tuple)):
        return chop_array(np.asarray(value), epsilon)
    return chop_scalar(value, epsilon)
