"""Sparse ket encoding of dense state vectors.

A dense vector of ``qudit_dim ** n`` amplitudes is turned into a mapping from
basis-state label to amplitude. Labels write the basis index in radix
``qudit_dim`` with the most significant qudit first, so the qudit at index 0
is the rightmost digit (the qiskit little-endian convention). When register
sizes are supplied, the digits are split into space separated groups, one per
register, in the order given.
"""

from __future__ import annotations

import math
from typing import Dict, Optional, Sequence

import numpy as np

from ..exceptions import InvalidStateError
from .probabilities import amplitude_probability

MAX_QUDIT_DIM = 36  # digit alphabet of numpy.base_repr


def num_qudits(size: int, qudit_dim: int = 2) -> int:
    """Return ``n`` such that ``qudit_dim ** n == size``."""
    if qudit_dim < 2 or qudit_dim > MAX_QUDIT_DIM:
        raise InvalidStateError(size, qudit_dim, f"qudit_dim must be between 2 and {MAX_QUDIT_DIM}")
    if size < 1:
        raise InvalidStateError(size, qudit_dim, "state vector is empty")
    n = int(round(math.log(size, qudit_dim)))
    if qudit_dim**n != size:
        raise InvalidStateError(size, qudit_dim, "size is not a power of the qudit dimension")
    return n


def basis_label(index: int, qudit_dim: int, width: int, registers: Optional[Sequence[int]] = None) -> str:
    """Label of basis state ``index`` for ``width`` qudits."""
    digits = np.base_repr(index, base=qudit_dim).zfill(width) if width else ""
    if not registers or sum(registers) != width:
        return digits
    groups = []
    pos = 0
    for size in registers:
        groups.append(digits[pos : pos + size])
        pos += size
    return " ".join(groups)


def vector_to_ket(
    vector,
    qudit_dim: int = 2,
    epsilon: float = 1e-10,
    registers: Optional[Sequence[int]] = None,
) -> Dict[str, complex]:
    """Encode a dense state vector as a sparse ket.

    Args:
        vector: Dense complex amplitudes.
        qudit_dim: Radix of each qudit.
        epsilon: Entries with squared magnitude not exceeding this are omitted.
        registers: Register sizes in display order (leftmost group first).
            Ignored unless the sizes add up to the number of qudits.

    Returns:
        Dict mapping basis label to amplitude for every retained entry.

    Raises:
        InvalidStateError: If the vector length is not a power of ``qudit_dim``.
    """
    vec = np.asarray(vector, dtype=complex).ravel()
    width = num_qudits(vec.size, qudit_dim)
    regs = list(registers) if registers else None

    ket: Dict[str, complex] = {}
    for index in np.flatnonzero(vec):
        amp = complex(vec[index])
        if amplitude_probability(amp) > epsilon:
            ket[basis_label(int(index), qudit_dim, width, regs)] = amp
    return ket
