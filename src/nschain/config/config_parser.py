"""Configuration loading and merging for the nschain CLI.

Brief:
  Reads the optional YAML config file, validates it, and layers command-line
  overrides on top of file values and built-in defaults.

Inputs:
  - YAML config path and argparse namespace values.

Outputs:
  - A plain dict with every supported key present.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Optional

import yaml

from ..query import DEFAULT_TIMEOUT
from ..resolv_conf import DEFAULT_RESOLV_CONF
from .config_schema import validate_config

DEFAULTS: Dict[str, Any] = {
    "resolv_conf": DEFAULT_RESOLV_CONF,
    "timeout": DEFAULT_TIMEOUT,
    "seed": None,
    "logging": {"level": "warn", "stderr": True, "file": None},
}


def load_config_file(path: Optional[str]) -> Dict[str, Any]:
    """Brief: Read and validate a YAML config file.

    Inputs:
      - path: Path to YAML file, or None for an empty config.

    Outputs:
      - Dict of file values (possibly empty).

    Raises:
      - ValueError: unreadable file, invalid YAML, non-mapping top level or
        schema violations.
    """

    if not path:
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except OSError as exc:
        raise ValueError(f"cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid YAML in {path}: {exc}") from exc

    if not isinstance(cfg, dict):
        raise ValueError(f"config file {path} must contain a mapping")

    validate_config(cfg, config_path=path)
    return cfg


def merge_config(
    file_cfg: Dict[str, Any],
    *,
    resolv_conf: Optional[str] = None,
    timeout: Optional[float] = None,
    seed: Optional[int] = None,
    log_level: Optional[str] = None,
) -> Dict[str, Any]:
    """Brief: Combine defaults, file values and CLI overrides (highest wins).

    Inputs:
      - file_cfg: Validated mapping from load_config_file().
      - resolv_conf/timeout/seed/log_level: CLI values; None means "not given".

    Outputs:
      - Dict with keys resolv_conf, timeout, seed and logging.
    """

    cfg = copy.deepcopy(DEFAULTS)
    for key, value in file_cfg.items():
        if key == "logging" and isinstance(value, dict):
            cfg["logging"].update(value)
        elif key in cfg:
            cfg[key] = value

    if resolv_conf is not None:
        cfg["resolv_conf"] = resolv_conf
    if timeout is not None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        cfg["timeout"] = timeout
    if seed is not None:
        cfg["seed"] = seed
    if log_level is not None:
        cfg["logging"]["level"] = log_level

    return cfg
