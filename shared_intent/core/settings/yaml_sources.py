"""YAML settings sources with conf.d override directories.

Each settings model reads, in order, ``conf/<name>.yaml`` then every
``conf/<name>.d/*.yaml`` file sorted by name; later files win. The base
directory can be moved with ``<NAME>_CONFIG_DIR``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic_settings import YamlConfigSettingsSource

if TYPE_CHECKING:
    from pydantic_settings import BaseSettings

DEFAULT_CONFIG_DIR = "conf"


def discover_yaml_files(name: str, config_dir: Path) -> list[Path]:
    """Existing YAML files for ``name``, base file first."""
    files = [config_dir / f"{name}.yaml"]
    overrides = config_dir / f"{name}.d"
    if overrides.is_dir():
        files.extend(sorted([*overrides.glob("*.yaml"), *overrides.glob("*.yml")], key=lambda p: p.name))
    return [path for path in files if path.is_file()]


class ConfDYamlConfigSettingsSource(YamlConfigSettingsSource):
    """YamlConfigSettingsSource over ``conf/<name>.yaml`` and ``conf/<name>.d/``."""

    def __init__(self, settings_cls: type[BaseSettings], name: str) -> None:
        config_dir = Path(os.getenv(f"{name.upper()}_CONFIG_DIR", DEFAULT_CONFIG_DIR))
        self.yaml_files = discover_yaml_files(name, config_dir)
        super().__init__(settings_cls, yaml_file=self.yaml_files or None, yaml_file_encoding="utf-8")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(map(str, self.yaml_files))})"


def create_rabbit_yaml_source(settings_cls: type[BaseSettings]) -> ConfDYamlConfigSettingsSource:
    """conf/rabbit.yaml + conf/rabbit.d/ (RABBIT_CONFIG_DIR)."""
    return ConfDYamlConfigSettingsSource(settings_cls, "rabbit")


def create_logging_yaml_source(settings_cls: type[BaseSettings]) -> ConfDYamlConfigSettingsSource:
    """conf/logging.yaml + conf/logging.d/ (LOGGING_CONFIG_DIR)."""
    return ConfDYamlConfigSettingsSource(settings_cls, "logging")
