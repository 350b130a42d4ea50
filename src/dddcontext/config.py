"""Configuration management for dddcontext."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from dddcontext.context.policy import DEFAULT_ENHANCER_ORDER, DEFAULT_POLICY, DEFAULT_TIERS
from dddcontext.exceptions import ConfigError

DDDCONTEXT_DIR = ".dddcontext"
CONFIG_FILE = "config.json"
CATALOG_DB_FILE = "catalog.db"


class SelectionConfig(BaseModel):
    """Selection policy: inclusion rules and tier precedence."""

    default_budget: int = Field(default=8000, ge=0)
    policy: dict[str, str] = Field(
        default_factory=lambda: {k: v.value for k, v in DEFAULT_POLICY.items()}
    )
    tiers: list[list[str]] = Field(
        default_factory=lambda: [list(t) for t in DEFAULT_TIERS]
    )
    enhancer_order: list[str] = Field(default_factory=lambda: list(DEFAULT_ENHANCER_ORDER))
    default_enhancers: list[str] = Field(default_factory=list)


class CatalogConfig(BaseModel):
    """Catalog storage configuration."""

    db_file: str = CATALOG_DB_FILE


class ProjectConfig(BaseModel):
    """Full project configuration."""

    name: str = ""
    root_path: str = "."
    selection: SelectionConfig = Field(default_factory=SelectionConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from `start` looking for a .dddcontext directory."""
    current = (start or Path.cwd()).resolve()
    while current != current.parent:
        if (current / DDDCONTEXT_DIR).is_dir():
            return current
        current = current.parent
    if (current / DDDCONTEXT_DIR).is_dir():
        return current
    return None


def get_project_dir(root: Path) -> Path:
    """Get the .dddcontext directory for a project root."""
    return root / DDDCONTEXT_DIR


def get_catalog_path(root: Path, config: ProjectConfig) -> Path:
    return get_project_dir(root) / config.catalog.db_file


def load_config(root: Path) -> ProjectConfig:
    """Load configuration from .dddcontext/config.json."""
    config_path = get_project_dir(root) / CONFIG_FILE
    if config_path.exists():
        try:
            return ProjectConfig(**json.loads(config_path.read_text()))
        except (json.JSONDecodeError, ValidationError) as e:
            raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e
    return ProjectConfig(name=root.name, root_path=str(root))


def save_config(root: Path, config: ProjectConfig) -> None:
    """Save configuration to .dddcontext/config.json."""
    project_dir = get_project_dir(root)
    project_dir.mkdir(parents=True, exist_ok=True)
    config_path = project_dir / CONFIG_FILE
    config_path.write_text(json.dumps(config.model_dump(), indent=2))


def _walk(data: dict, key: str) -> tuple[dict, str]:
    """Resolve a dotted key to its parent mapping and leaf name."""
    parts = key.split(".")
    target = data
    for part in parts[:-1]:
        if part not in target or not isinstance(target[part], dict):
            raise KeyError(f"Invalid config key: {key}")
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Invalid config key: {key}")
    return target, parts[-1]


def get_config_value(config: ProjectConfig, key: str) -> Any:
    """Read a nested config value using dot notation (e.g., 'selection.tiers')."""
    target, leaf = _walk(config.model_dump(), key)
    return target[leaf]


def set_config_value(config: ProjectConfig, key: str, value: Any) -> ProjectConfig:
    """Set a nested config value using dot notation (e.g., 'selection.default_budget')."""
    data = config.model_dump()
    target, leaf = _walk(data, key)
    target[leaf] = value
    try:
        return ProjectConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid value for {key}: {e.errors()[0]['msg']}") from e
