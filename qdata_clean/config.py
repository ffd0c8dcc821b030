"""Configuration defaults and the optional YAML config file.

Every section of DEFAULT_CONFIG can be overridden key by key; library
functions read their section through section(), so a partial dict works
anywhere a full config is accepted.
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULT_CONFIG: Dict[str, Any] = {
    # -----------------------------
    # CLEANING
    # -----------------------------
    "cleaning": {
        "options": ["remove_nulls", "standardize_format"],
        "outlier_method": "iqr",  # iqr | tail
        "iqr_multiplier": 1.5,
        "tail_fraction": 0.05,  # only used by the tail method
        "degenerate_columns": "zero",  # zero | raise
        "decimals": 4,
    },
    # -----------------------------
    # EXPORT
    # -----------------------------
    "export": {
        "include_metadata": True,
        "include_statistics": False,
        "compress": False,
    },
}


def section(config: Optional[Dict[str, Any]], name: str) -> Dict[str, Any]:
    """Return one config section with defaults filled in."""
    merged = copy.deepcopy(DEFAULT_CONFIG[name])
    if config:
        merged.update(config.get(name) or {})
    return merged


def load_config(path: Optional[str]) -> Dict[str, Any]:
    """
    Load a YAML config file and merge it over DEFAULT_CONFIG.

    Sections the user omits keep their defaults; keys inside a section
    override one by one.
    """
    user_config: Dict[str, Any] = {}

    if path:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f) or {}

        if not isinstance(user_config, dict):
            raise ValueError("Config file must contain a YAML dictionary")

    for key, value in user_config.items():
        if key in DEFAULT_CONFIG and value is not None and not isinstance(value, dict):
            raise ValueError(f"Config section '{key}' must be a mapping")

    config = {name: section(user_config, name) for name in DEFAULT_CONFIG}
    # unknown top-level keys are carried through untouched
    for key, value in user_config.items():
        config.setdefault(key, value)
    return config
