"""
Configuration management for irisloc
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

DEFAULT_CONFIG = {
    "preprocessing": {
        "blur_kernel": 5
    },
    "edge_map": {
        "dark_threshold": 25,
        "open_kernel": 7,
        "sobel_kernel": 3
    },
    "search": {
        "min_radius": 5,
        "max_radius": 14,
        "max_small_size": 60,
        "workers": 1
    }
}


def merge_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Merge overrides over a copy of the default configuration.

    Args:
        overrides: Nested dictionary with the same sections as DEFAULT_CONFIG

    Returns:
        Complete configuration dictionary
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if not overrides:
        return config

    for section, values in overrides.items():
        if section not in config:
            raise ValueError(f"Unknown config section: {section}")
        if not isinstance(values, dict):
            raise ValueError(f"Config section '{section}' must be a mapping")
        for key, value in values.items():
            if key not in config[section]:
                raise ValueError(f"Unknown config key: {section}.{key}")
            config[section][key] = value

    return config


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a YAML config file and merge it over the defaults."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, 'r') as f:
        data = yaml.safe_load(f)

    if data is None:
        return merge_config()
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return merge_config(data)
