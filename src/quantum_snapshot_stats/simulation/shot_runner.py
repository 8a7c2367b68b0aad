"""Shot execution split into independently accumulated batches.

Each batch gets its own :class:`SnapshotEngine` and its own backend seeded
from a spawned ``numpy.random.SeedSequence``. Batches may run on a thread
pool; their engines are merged in batch order afterwards, so the result for a
fixed seed does not depend on ``max_workers``.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, List, Mapping, Optional, Union

import numpy as np
from qiskit import QuantumCircuit

from ..core.engine_options import EngineOptions
from ..core.snapshot_engine import SnapshotEngine
from ..exceptions import InvalidOptionError
from .circuit_descriptor import CircuitDescriptor
from .statevector_backend import StatevectorShotBackend

logger = logging.getLogger(__name__)


def merge_engines(engines: Iterable[SnapshotEngine], options: Optional[EngineOptions] = None) -> SnapshotEngine:
    """Fold engines, in order, into a fresh engine."""
    engines = list(engines)
    if options is None:
        options = engines[0].options if engines else EngineOptions()
    merged = SnapshotEngine(options)
    for engine in engines:
        merged += engine
    return merged


def _batch_sizes(shots: int, batches: int) -> List[int]:
    base, extra = divmod(shots, batches)
    return [base + (1 if idx < extra else 0) for idx in range(batches)]


def _run_batch(
    circuit: QuantumCircuit,
    descriptor: CircuitDescriptor,
    options: EngineOptions,
    shots: int,
    seed: np.random.SeedSequence,
) -> SnapshotEngine:
    engine = SnapshotEngine(options)
    backend = StatevectorShotBackend(circuit, seed=seed)
    for _ in range(shots):
        backend.run_shot()
        engine.compute_results(descriptor, backend)
    logger.debug("Batch finished: %d shots", shots)
    return engine


def run_shots(
    circuit: QuantumCircuit,
    options: Union[EngineOptions, Mapping[str, Any], None] = None,
    shots: int = 1024,
    seed: Optional[int] = None,
    batches: int = 1,
    max_workers: Optional[int] = None,
) -> SnapshotEngine:
    """Run ``shots`` shots of ``circuit`` and return the merged engine.

    Args:
        circuit: Circuit whose barriers mark snapshot points.
        options: Engine options, or a settings mapping to parse them from.
        shots: Total number of shots.
        seed: Master seed for measurement sampling.
        batches: Number of independently accumulated shot batches.
        max_workers: Thread pool size; batches run sequentially when this is
            ``None`` or 1.
    """
    if shots < 0:
        raise InvalidOptionError("shots", shots, "must be non-negative")
    if batches < 1:
        raise InvalidOptionError("batches", batches, "must be at least 1")
    if max_workers is not None and max_workers < 1:
        raise InvalidOptionError("max_workers", max_workers, "must be at least 1")
    if not isinstance(options, EngineOptions):
        options = EngineOptions.from_settings(options)

    batches = max(1, min(batches, shots))
    descriptor = CircuitDescriptor.from_quantum_circuit(circuit)
    seeds = np.random.SeedSequence(seed).spawn(batches)
    sizes = _batch_sizes(shots, batches)
    logger.info("Running %d shots in %d batch(es)", shots, batches)

    def worker(idx: int) -> SnapshotEngine:
        return _run_batch(circuit, descriptor, options, sizes[idx], seeds[idx])

    if max_workers is not None and max_workers > 1 and batches > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            engines = list(pool.map(worker, range(batches)))
    else:
        engines = [worker(idx) for idx in range(batches)]

    merged = merge_engines(engines, options)
    logger.info("Accumulated %d shots", merged.total_shots)
    return merged
