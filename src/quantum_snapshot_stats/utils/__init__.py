"""Configuration and serialisation helpers."""

from .config_loader import load_config
from .serialization import to_json, to_serializable, write_results

__all__ = ["load_config", "to_json", "to_serializable", "write_results"]
