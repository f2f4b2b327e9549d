"""Persisted scan defaults stored as YAML.

The configuration is an explicit object with a load/save lifecycle: the
CLI loads it once, merges it under its own flags and saves it back only
when asked to (`--save-config`).
"""

from __future__ import annotations

from pathlib import Path

import yaml
from platformdirs import user_config_dir
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from file_forge.config import APP_NAME, DEFAULT_MAX_FILE_SIZE
from file_forge.exceptions import ConfigFileError
from file_forge.logging import logger

CONFIG_FILENAME = "config.yaml"


def default_config_path() -> Path:
    """Return the per-user configuration file location."""
    return Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


class UserConfig(BaseModel):
    """Scan defaults applied when the matching CLI flag is not given."""

    model_config = ConfigDict(extra="forbid")

    include: list[str] = Field(default_factory=list, description="Default include globs.")
    exclude: list[str] = Field(default_factory=list, description="Default exclude globs.")
    max_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, ge=0, description="Default max file size in bytes.")
    ignore: bool = Field(default=True, description="Respect .gitignore files.")
    skip_artifacts: bool = Field(default=True, description="Skip build and dependency artifacts.")
    verbose: bool = Field(default=False, description="Include file contents in reports.")


def load_user_config(path: Path | None = None) -> UserConfig:
    """Load persisted defaults.

    Args:
        path (Path | None, optional): the YAML file. Defaults to the per-user location.

    Raises:
        ConfigFileError: if the file exists but is not a valid configuration

    Returns:
        UserConfig: the loaded configuration, or defaults when the file is missing
    """
    cfg_path = path or default_config_path()
    if not cfg_path.is_file():
        logger.debug("No configuration file at %s, using defaults", cfg_path)
        return UserConfig()
    try:
        data = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigFileError(path=cfg_path, reason=str(e)) from e
    if not isinstance(data, dict):
        raise ConfigFileError(path=cfg_path, reason="top-level value must be a mapping")
    try:
        return UserConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigFileError(path=cfg_path, reason=str(e)) from e


def save_user_config(config: UserConfig, path: Path | None = None) -> Path:
    """Persist defaults as YAML, creating parent directories.

    Args:
        config (UserConfig): the configuration to save
        path (Path | None, optional): the YAML file. Defaults to the per-user location.

    Returns:
        Path: the file written
    """
    cfg_path = path or default_config_path()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    cfg_path.write_text(
        yaml.safe_dump(config.model_dump(), sort_keys=False, allow_unicode=True),
        encoding="utf-8",
    )
    logger.info("Saved configuration to %s", cfg_path)
    return cfg_path
