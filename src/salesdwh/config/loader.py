"""
Configuration loading utilities.

Supports environment variable interpolation and config inheritance.
Minimal configs only need: project
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from salesdwh.config.settings import (
    CleansingConfig,
    LoggingConfig,
    PipelineConfig,
    SourcesConfig,
    WarehouseConfig,
)


def _interpolate_env_vars(value: str) -> str:
    """
    Interpolate environment variables in string values.

    Supports ${VAR} and ${VAR:default} syntax.
    """
    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        return os.environ.get(var_name, default if default is not None else "")

    return re.sub(pattern, replacer, value)


def _process_config_values(obj: Any) -> Any:
    """Recursively process config values for env var interpolation."""
    if isinstance(obj, str):
        return _interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _process_config_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_process_config_values(item) for item in obj]
    return obj


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and process environment variables."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return _process_config_values(data) if data else {}


def load_config(
    config_path: Path,
    base_path: Path | None = None,
) -> PipelineConfig:
    """
    Load pipeline configuration from YAML file(s).

    Minimal config requires only:
        - project: str

    Everything else falls back to defaults: a SQLite warehouse under
    ./warehouse and the standard CRM/ERP export names under ./datasets.

    Args:
        config_path: Path to the main configuration file.
        base_path: Optional path to base configuration for inheritance.

    Returns:
        Fully validated PipelineConfig instance.
    """
    if base_path is not None:
        base_data = load_yaml(base_path)
    else:
        # Try to find base.yaml in same directory
        potential_base = config_path.parent / "base.yaml"
        base_data = (
            load_yaml(potential_base)
            if potential_base.exists() and potential_base != config_path
            else {}
        )

    main_data = load_yaml(config_path)

    # Merge configs (main overrides base)
    merged = _deep_merge(base_data, main_data)

    project = merged.get("project")
    if not project:
        msg = "Config must specify 'project' name"
        raise ValueError(msg)

    warehouse_data = merged.get("warehouse", {})
    warehouse = WarehouseConfig(
        url=warehouse_data.get("url") or None,
        directory=Path(warehouse_data.get("directory", "./warehouse")),
        echo=warehouse_data.get("echo", False),
    )

    # Source paths: per-table overrides on top of the standard export names
    sources_data = dict(merged.get("sources", {}))
    sources_root = Path(sources_data.pop("root", "./datasets"))
    unknown = sorted(set(sources_data) - set(SourcesConfig.model_fields) - {"root"})
    if unknown:
        msg = f"Unknown source tables in config: {', '.join(unknown)}"
        raise ValueError(msg)
    sources = SourcesConfig(
        root=sources_root,
        **{table: Path(path) for table, path in sources_data.items()},
    )

    # Cleansing settings override the defaults field by field
    cleansing = CleansingConfig(**merged.get("cleansing", {}))

    logging_data = merged.get("logging", {})
    logging_config = LoggingConfig(
        level=logging_data.get("level", "INFO"),
        json_output=logging_data.get("json", False),
        file=Path(logging_data["file"]) if logging_data.get("file") else None,
    )

    return PipelineConfig(
        project=project,
        warehouse=warehouse,
        sources=sources,
        cleansing=cleansing,
        logging=logging_config,
    )
