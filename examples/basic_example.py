"""Bell-state preparation with snapshots before and after entangling."""

from __future__ import annotations

import numpy as np
from qiskit import ClassicalRegister, QuantumCircuit, QuantumRegister

from quantum_snapshot_stats import run_shots
from quantum_snapshot_stats.utils import to_json


def build_circuit() -> QuantumCircuit:
    qreg = QuantumRegister(2, "q")
    creg = ClassicalRegister(2, "c")
    circuit = QuantumCircuit(qreg, creg)
    circuit.h(0)
    circuit.barrier(label="snapshot:0")
    circuit.cx(0, 1)
    circuit.barrier(label="snapshot:1")
    circuit.measure(qreg, creg)
    return circuit


def main() -> None:
    bell = np.array([1, 0, 0, 1]) / np.sqrt(2)
    settings = {
        "data": ["densitymatrix", "probs", "probsket", "targetstatesprobs"],
        "target_states": [bell.tolist()],
    }
    engine = run_shots(build_circuit(), settings, shots=200, seed=42, batches=4)
    print(to_json(engine.export()))


if __name__ == "__main__":
    main()
