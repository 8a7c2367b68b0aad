"""JSON encoding of exported snapshot statistics.

Complex numbers become ``[real, imag]`` pairs and numpy arrays nested lists.
Snapshot keys are integers in memory and strings in JSON.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

import numpy as np


def _complex_pair(value: complex) -> list:
    return [float(value.real), float(value.imag)]


def to_serializable(obj: Any) -> Any:
    """Recursively convert an export document into JSON-compatible values."""
    if isinstance(obj, dict):
        return {str(key): to_serializable(val) for key, val in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_serializable(val) for val in obj]
    if isinstance(obj, np.ndarray):
        if np.iscomplexobj(obj):
            return to_serializable(obj.tolist())
        return obj.tolist()
    if isinstance(obj, (complex, np.complexfloating)):
        return _complex_pair(obj)
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    return obj


def to_json(document: Dict[str, Any], indent: int = 2) -> str:
    """Serialise an export document to a JSON string."""
    return json.dumps(to_serializable(document), indent=indent)


def write_results(path: Union[str, Path], document: Dict[str, Any]) -> Path:
    """Write an export document as JSON and return the resolved path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_json(document))
    return path.resolve()
