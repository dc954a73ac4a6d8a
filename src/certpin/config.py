import logging
from os import path
from pathlib import Path
from copy import deepcopy

import yaml

from . import constants

__module__ = "certpin.config"

logger = logging.getLogger(__name__)
DEFAULT_CONFIG = ".certpin-config.yaml"
CONFIG_PATH = f"{path.expanduser('~')}/.config/certpin"


def _deep_merge(*args) -> dict:
    assert len(args) >= 2, "_deep_merge requires at least two dicts to merge"
    result = deepcopy(args[0])
    if not isinstance(result, dict):
        raise AttributeError(
            f"_deep_merge only takes dict arguments, got {type(result)} {result}"
        )
    for merge_dict in args[1:]:
        if not isinstance(merge_dict, dict):
            raise AttributeError(
                f"_deep_merge only takes dict arguments, got {type(merge_dict)} {merge_dict}"
            )
        for key, merge_val in merge_dict.items():
            result_val = result.get(key)
            if isinstance(result_val, dict) and isinstance(merge_val, dict):
                result[key] = _deep_merge(result_val, merge_val)
            else:
                result[key] = deepcopy(merge_val)
    return result


def _validate_config(combined_config: dict) -> dict:
    policy = combined_config["defaults"].get("policy")
    if policy not in constants.POLICIES:
        raise AttributeError(
            f"Invalid policy {policy}, expected one of {', '.join(constants.POLICIES)}"
        )
    outputs = []
    for output in combined_config.get("outputs", []):
        if not isinstance(output, dict) or output.get("type") not in ["console", "json"]:
            raise AttributeError(f"Invalid output {output}")
        outputs.append(output)
    combined_config["outputs"] = outputs
    return combined_config


def combine_configs(user_conf: dict, custom_conf: dict) -> dict:
    default_values = default_config()
    ret_config = _deep_merge(
        {"defaults": default_values.get("defaults", {})},
        {"defaults": user_conf.get("defaults", {})},
        {"defaults": custom_conf.get("defaults", {})},
    )
    outputs = list(user_conf.get("outputs", []))
    outputs.extend(
        [
            item
            for item in custom_conf.get("outputs", [])
            if item["type"] not in [i["type"] for i in outputs]
        ]
    )
    if not outputs:
        outputs = default_values["outputs"]
    ret_config["outputs"] = outputs
    return _validate_config(ret_config)


def get_config(custom_values: dict | None = None) -> dict:
    user_config = load_config(path.join(CONFIG_PATH, DEFAULT_CONFIG))
    return combine_configs(user_config, custom_values or {})


def default_config() -> dict:
    return yaml.safe_load(DEFAULT_VALUES)


def load_config(filename: str = DEFAULT_CONFIG) -> dict:
    config_path = Path(filename)
    if config_path.is_file():
        logger.debug(config_path.absolute())
        return yaml.safe_load(config_path.read_text(encoding="utf8")) or {}
    return {}


DEFAULT_VALUES = b"""
---
defaults:
  # chain_only ignores the certificate names, use it when connecting to an
  # address that differs from the name the certificate was issued for
  policy: strict_hostname

outputs:
  - type: console
    use_icons: false
"""
