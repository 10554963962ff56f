"""Coordinator configuration loaded from YAML.

The packaged defaults.yaml holds every setting. A user file only needs the
keys it changes::

    diagnostics:
      javascript_timeout: 30
    chaining:
      max_chain_depth: null
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from chained_steps.exceptions import ConfigError

DEFAULT_CONFIG = Path(__file__).parent / "defaults.yaml"


@dataclass(frozen=True)
class DiagnosticsConfig:
    enabled: bool
    keyword: str
    wait_step_text: str
    exceptions_step_text: str
    javascript_timeout: float
    poll_frequency: float
    pending_js_script: str
    captured_errors_script: str
    error_selectors: tuple[str, ...]


@dataclass(frozen=True)
class ChainingConfig:
    max_chain_depth: Optional[int]


@dataclass(frozen=True)
class CoordinatorConfig:
    diagnostics: DiagnosticsConfig
    chaining: ChainingConfig


_SECTIONS = {"diagnostics": DiagnosticsConfig, "chaining": ChainingConfig}


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")
    return data


def _merge(defaults: dict[str, Any], overrides: dict[str, Any], source: Path) -> dict[str, Any]:
    merged = {name: dict(values) for name, values in defaults.items()}
    for section, values in overrides.items():
        if section not in _SECTIONS:
            raise ConfigError(f"{source}: unknown section '{section}'")
        if not isinstance(values, dict):
            raise ConfigError(f"{source}: section '{section}' must be a mapping")
        known = {f.name for f in fields(_SECTIONS[section])}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigError(
                f"{source}: unknown key(s) in '{section}': {', '.join(unknown)}"
            )
        merged.setdefault(section, {}).update(values)
    return merged


def _build(data: dict[str, Any]) -> CoordinatorConfig:
    diagnostics = dict(data["diagnostics"])
    diagnostics["error_selectors"] = tuple(diagnostics.get("error_selectors") or ())
    depth = data["chaining"]["max_chain_depth"]
    if depth is not None and (not isinstance(depth, int) or depth < 1):
        raise ConfigError(f"max_chain_depth must be a positive integer or null, got {depth!r}")
    try:
        return CoordinatorConfig(
            diagnostics=DiagnosticsConfig(**diagnostics),
            chaining=ChainingConfig(max_chain_depth=depth),
        )
    except TypeError as e:
        raise ConfigError(f"Incomplete configuration: {e}") from e


def load_config(path: Union[str, Path, None] = None) -> CoordinatorConfig:
    """Load the coordinator configuration.

    Args:
        path: Optional YAML file merged over the packaged defaults

    Returns:
        CoordinatorConfig instance

    Raises:
        ConfigError: If the file has unknown sections or keys
    """
    data = _read_yaml(DEFAULT_CONFIG)
    if path is not None:
        path = Path(path)
        data = _merge(data, _read_yaml(path), path)
    return _build(data)
