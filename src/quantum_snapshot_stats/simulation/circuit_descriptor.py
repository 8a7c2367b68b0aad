"""Register layout of a circuit, as needed for labelling ket basis states."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from qiskit import QuantumCircuit


@dataclass(frozen=True)
class CircuitDescriptor:
    """Quantum register sizes in declaration order."""

    qubit_sizes: Tuple[Tuple[str, int], ...]

    @property
    def num_qubits(self) -> int:
        return sum(size for _, size in self.qubit_sizes)

    def ket_registers(self) -> List[int]:
        """Register sizes in display order: last-declared register leftmost."""
        return [size for _, size in reversed(self.qubit_sizes)]

    @classmethod
    def from_quantum_circuit(cls, circuit: QuantumCircuit) -> "CircuitDescriptor":
        if circuit.qregs:
            sizes = tuple((reg.name, reg.size) for reg in circuit.qregs)
        else:
            sizes = (("q", circuit.num_qubits),)
        return cls(qubit_sizes=sizes)
