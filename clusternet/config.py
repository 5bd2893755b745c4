"""TOML-based infra and provider defaults configuration.

Loads ~/.clusternet/defaults.toml (global) and clusternet.toml (project),
merges them, and resolves named infras into ``Infra`` objects plus the
``AWSDefaults`` to provision them with.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from clusternet.core.exceptions import ConfigurationError
from clusternet.providers.aws.config import AWSDefaults
from clusternet.types import Infra, InfraSpec

type RawConfig = dict[str, Any]

GLOBAL_CONFIG_PATH = Path.home() / ".clusternet" / "defaults.toml"
PROJECT_CONFIG_NAME = "clusternet.toml"


def _deep_merge(base: RawConfig, override: RawConfig) -> RawConfig:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> RawConfig:
    if not path.is_file():
        return {}
    with path.open("rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e


def load_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> RawConfig:
    global_cfg = _read_toml(global_path or GLOBAL_CONFIG_PATH)
    project_path = (project_dir or Path.cwd()) / PROJECT_CONFIG_NAME
    project_cfg = _read_toml(project_path)

    merged = _deep_merge(global_cfg, project_cfg)
    merged.setdefault("defaults", {})
    merged.setdefault("infras", {})
    return merged


def _build_defaults(raw: RawConfig) -> AWSDefaults:
    try:
        return AWSDefaults(**raw)
    except TypeError as e:
        raise ConfigurationError(f"Invalid [defaults] table: {e}") from e


def _build_spec(name: str, raw: RawConfig) -> InfraSpec:
    try:
        return InfraSpec.from_dict(raw)
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid infra '{name}': {e}") from e


def resolve_infra(
    name: str,
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> tuple[Infra, AWSDefaults]:
    """Build the named infra and the defaults to provision it with.

    Per-infra ``[infras.<name>.defaults]`` values override the top-level
    ``[defaults]`` table.

    Raises:
        ConfigurationError: Unknown infra name or malformed tables.
    """
    config = load_config(project_dir=project_dir, global_path=global_path)

    infras = config["infras"]
    if name not in infras:
        raise ConfigurationError(
            f"Infra '{name}' not found. Available: {', '.join(infras) or 'none'}"
        )

    raw_infra = dict(infras[name])
    raw_defaults = _deep_merge(config["defaults"], raw_infra.pop("defaults", {}))

    return Infra(name=name, spec=_build_spec(name, raw_infra)), _build_defaults(raw_defaults)
