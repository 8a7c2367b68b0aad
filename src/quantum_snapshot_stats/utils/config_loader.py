# quantum_snapshot_stats/src/quantum_snapshot_stats/utils/config_loader.py
import json
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from ..exceptions import ConfigurationError


def load_config(config_path: Union[str, Path] = "config.yaml") -> Dict[str, Any]:
    """
    Loads a YAML or JSON run configuration file.

    Files ending in ``.json`` are parsed as JSON, everything else as YAML.

    Args:
        config_path (str | Path): The path to the configuration file.

    Returns:
        Dict[str, Any]: A dictionary containing the configuration.

    Raises:
        FileNotFoundError: If the configuration file cannot be found.
        ConfigurationError: If the file cannot be parsed or is not a mapping.
    """
    path = Path(config_path)
    try:
        with open(path, "r") as f:
            if path.suffix.lower() == ".json":
                config = json.load(f)
            else:
                config = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file not found at: {config_path}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Error parsing configuration file {config_path}: {e}")

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Configuration file {config_path} must contain a mapping",
            details={"type": type(config).__name__},
        )
    return config
