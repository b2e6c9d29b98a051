"""Configuration loading and resolution for sshdeploy"""

import dataclasses
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from sshdeploy.constants import (
    DEFAULT_OPTIONS,
    ENV_PASSPHRASE,
    ENV_PASSWORD,
    ENV_PRIVATE_KEY,
    OPTION_ALIASES,
    READY_TIMEOUT_MS_KEY,
)
from sshdeploy.exceptions import ConfigError
from sshdeploy.models.config import DeploymentConfig

FIELD_NAMES = {f.name for f in dataclasses.fields(DeploymentConfig)}


def load_options_file(path: Path) -> Dict[str, Any]:
    """
    Load deployment options from a YAML or JSON file.

    Args:
        path: Option file path (.yml, .yaml or .json)

    Returns:
        Raw option mapping, keys as written in the file

    Raises:
        ConfigError: If the file is missing or not a mapping
    """
    path = Path(path)
    try:
        with open(path) as f:
            # JSON is a subset of YAML, one loader covers both
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"Option file not found: {path}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid option file: {path}", context=str(e))

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Invalid option file: {path}",
            context=f"Expected a mapping, got {type(data).__name__}",
        )
    return data


def options_from_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Read credential options from SSHDEPLOY_* environment variables."""
    if environ is None:
        environ = os.environ
    options = {
        "password": environ.get(ENV_PASSWORD),
        "private_key": environ.get(ENV_PRIVATE_KEY),
        "passphrase": environ.get(ENV_PASSPHRASE),
    }
    return {k: v for k, v in options.items() if v}


def normalize_options(options: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Map option-file spellings (from, to, privateKey, ...) to field names.

    None values are dropped so unset CLI flags never mask lower layers.

    Raises:
        ConfigError: On unknown option keys
    """
    normalized: Dict[str, Any] = {}
    for key, value in options.items():
        if value is None:
            continue
        if key == READY_TIMEOUT_MS_KEY:
            normalized["ready_timeout"] = _number(key, value) / 1000
            continue
        field = OPTION_ALIASES.get(key, key)
        if field not in FIELD_NAMES:
            raise ConfigError(
                f"Unknown option '{key}'",
                context=f"Recognized options: {', '.join(sorted(FIELD_NAMES))}",
            )
        normalized[field] = value
    return normalized


def merge_options(*layers: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge option layers; later layers override earlier ones."""
    merged: Dict[str, Any] = {}
    for layer in layers:
        merged.update(normalize_options(layer))
    return merged


def resolve_config(options: Mapping[str, Any]) -> DeploymentConfig:
    """
    Merge user options over the defaults and validate them.

    Args:
        options: User supplied options (file keys or field names)

    Returns:
        Fully resolved, immutable DeploymentConfig

    Raises:
        ConfigError: If credentials or required fields are missing or
            a value has the wrong type
    """
    resolved = dict(DEFAULT_OPTIONS)
    resolved.update(normalize_options(options))

    for key in ("host", "username"):
        if not resolved.get(key) or not isinstance(resolved[key], str):
            raise ConfigError(f"Missing required option: '{key}'")

    if not resolved.get("password") and not resolved.get("private_key"):
        raise ConfigError(
            "Password or privateKey is required.",
            context="Set 'password', or 'privateKey' with optional 'passphrase'",
        )

    port = resolved["port"]
    if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
        raise ConfigError(f"Invalid port: {port!r}")

    for key in ("zip", "cover", "debug"):
        if not isinstance(resolved[key], bool):
            raise ConfigError(f"Option '{key}' must be true or false, got {resolved[key]!r}")

    max_buffer = resolved["max_buffer"]
    if isinstance(max_buffer, bool) or not isinstance(max_buffer, int) or max_buffer <= 0:
        raise ConfigError(f"Invalid maxBuffer: {max_buffer!r}")

    resolved["ready_timeout"] = _number("ready_timeout", resolved["ready_timeout"])
    if resolved["ready_timeout"] <= 0:
        raise ConfigError(f"Invalid readyTimeout: {resolved['ready_timeout']!r}")

    resolved["source"] = str(resolved["source"])
    if resolved["target"] is not None:
        resolved["target"] = str(resolved["target"])

    resolved["exclude"] = _string_tuple("exclude", resolved["exclude"])
    for phase in ("before", "after"):
        if resolved[phase] is not None and not isinstance(resolved[phase], str):
            resolved[phase] = _string_tuple(phase, resolved[phase])

    return DeploymentConfig(**resolved)


def _string_tuple(key: str, value: Any) -> tuple:
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"Option '{key}' must be a string or a list of strings")
    return tuple(value)


def _number(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"Option '{key}' must be a number, got {value!r}")
    return float(value)
