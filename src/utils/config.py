"""Configuration loader.

Reads configuration files in YAML format and returns a dictionary.
Configuration files reside in the `configs/` directory at the project
root; `configs/alignment.yaml` holds the pipeline defaults.
"""

from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_CONFIG = Path(__file__).resolve().parents[2] / "configs" / "alignment.yaml"


def load_config(path: str) -> Dict[str, Any]:
    """Load a YAML configuration file into a dictionary.

    Parameters
    ----------
    path : str
        Path to the YAML configuration file.

    Returns
    -------
    dict
        Parsed configuration dictionary.  Returns an empty dict if the
        file does not exist or is empty.

    Raises
    ------
    ValueError
        If the top-level YAML node is not a mapping.
    """
    cfg_path = Path(path)
    if not cfg_path.is_file():
        return {}
    with open(cfg_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"configuration in {cfg_path} must be a mapping")
    return data
