"""Per-shot statevector execution of qiskit circuits with snapshot capture.

Each call to :meth:`StatevectorShotBackend.run_shot` runs the circuit once:
unitary instructions evolve a :class:`qiskit.quantum_info.Statevector`,
``measure`` and ``reset`` sample and collapse the state, and every
``barrier`` captures a copy of the current state vector as a snapshot.

A barrier labelled ``"snapshot:<k>"`` stores its snapshot under key ``k``
(a non-negative integer); any other barrier uses its position among the
circuit's barriers. Two barriers resolving to the same key are rejected.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import numpy as np
from qiskit import QuantumCircuit
from qiskit.circuit import ControlFlowOp
from qiskit.exceptions import QiskitError
from qiskit.quantum_info import Statevector

from ..exceptions import UnsupportedInstructionError

logger = logging.getLogger(__name__)

SNAPSHOT_LABEL_PREFIX = "snapshot:"
_NOOP_INSTRUCTIONS = {"delay", "id"}


def snapshot_key(label: Optional[str], ordinal: int) -> int:
    """Key under which a barrier's snapshot is stored."""
    if label and label.startswith(SNAPSHOT_LABEL_PREFIX):
        try:
            key = int(label[len(SNAPSHOT_LABEL_PREFIX):])
        except ValueError:
            key = -1
        if key >= 0:
            return key
        logger.warning("Barrier label '%s' has no non-negative integer key; using ordinal %d", label, ordinal)
    return ordinal


def _duplicate_key_error(key: int) -> UnsupportedInstructionError:
    return UnsupportedInstructionError("barrier", f"snapshot key {key} is captured by more than one barrier")


class StatevectorShotBackend:
    """Runs single shots of a circuit and exposes the captured states.

    Args:
        circuit: Circuit to execute. Control-flow instructions are not
            supported.
        seed: Seed (or ``numpy.random.SeedSequence``) for measurement sampling.
    """

    def __init__(self, circuit: QuantumCircuit, seed=None) -> None:
        self.circuit = circuit
        self._rng = np.random.default_rng(seed)
        self._qubit_index = {qubit: circuit.find_bit(qubit).index for qubit in circuit.qubits}
        self._clbit_index = {clbit: circuit.find_bit(clbit).index for clbit in circuit.clbits}
        self._state = Statevector.from_label("0" * circuit.num_qubits)
        self._clbits = np.zeros(circuit.num_clbits, dtype=int)
        self._snapshots: Dict[int, np.ndarray] = {}
        self.shots_run = 0

    @property
    def state_vector(self) -> np.ndarray:
        return self._state.data

    @property
    def snapshots(self) -> Dict[int, np.ndarray]:
        return self._snapshots

    @property
    def classical_outcome(self) -> Optional[str]:
        """Classical bits of the last shot, one space separated group per register."""
        if not self.circuit.num_clbits:
            return None
        if not self.circuit.cregs:
            return "".join(str(bit) for bit in self._clbits[::-1])
        groups = []
        for creg in reversed(self.circuit.cregs):
            groups.append("".join(str(self._clbits[self._clbit_index[bit]]) for bit in reversed(creg)))
        return " ".join(groups)

    def run_shot(self) -> None:
        """Execute the circuit once from the all-zero state."""
        self._state = Statevector.from_label("0" * self.circuit.num_qubits)
        self._clbits[:] = 0
        self._snapshots = {}
        barrier_ordinal = 0

        for instruction in self.circuit.data:
            op = instruction.operation
            qargs = [self._qubit_index[q] for q in instruction.qubits]

            if isinstance(op, ControlFlowOp):
                raise UnsupportedInstructionError(op.name, "classical control is not supported")

            if op.name == "barrier":
                key = snapshot_key(op.label, barrier_ordinal)
                if key in self._snapshots:
                    raise _duplicate_key_error(key)
                self._snapshots[key] = np.array(self._state.data, copy=True)
                barrier_ordinal += 1
            elif op.name == "measure":
                for qubit, clbit in zip(qargs, instruction.clbits):
                    self._clbits[self._clbit_index[clbit]] = self._measure(qubit)
            elif op.name == "reset":
                for qubit in qargs:
                    self._reset(qubit)
            elif op.name in _NOOP_INSTRUCTIONS:
                continue
            else:
                try:
                    self._state = self._state.evolve(op, qargs=qargs)
                except QiskitError as exc:
                    raise UnsupportedInstructionError(op.name, str(exc)) from exc

        self.shots_run += 1

    def _measure(self, qubit: int) -> int:
        data = self._state.data
        mask = self._bit_mask(qubit)
        p_one = float(np.sum(np.abs(data[mask]) ** 2))
        outcome = int(self._rng.random() < p_one)
        keep = mask if outcome else ~mask
        collapsed = np.where(keep, data, 0.0)
        norm = np.linalg.norm(collapsed)
        self._state = Statevector(collapsed / norm)
        return outcome

    def _reset(self, qubit: int) -> None:
        if self._measure(qubit) == 0:
            return
        data = self._state.data
        indices = np.arange(data.size)
        flipped = np.empty_like(data)
        flipped[indices ^ (1 << qubit)] = data
        self._state = Statevector(flipped)

    def _bit_mask(self, qubit: int) -> np.ndarray:
        indices = np.arange(2**self.circuit.num_qubits)
        return ((indices >> qubit) & 1).astype(bool)


def snapshot_keys(circuit: QuantumCircuit) -> List[int]:
    """Keys of the snapshots a circuit will capture, in execution order.

    Raises:
        UnsupportedInstructionError: If two barriers resolve to the same key.
    """
    keys = []
    ordinal = 0
    for instruction in circuit.data:
        if instruction.operation.name == "barrier":
            key = snapshot_key(instruction.operation.label, ordinal)
            if key in keys:
                raise _duplicate_key_error(key)
            keys.append(key)
            ordinal += 1
    return keys
