from __future__ import annotations

import os
from pathlib import Path

from dotenv import dotenv_values, find_dotenv
from pydantic import BaseModel, ConfigDict, Field

from file_forge.config import DEFAULT_MAX_FILE_SIZE, ScanOptions

ENV_FILE = find_dotenv(usecwd=True)
ENV_PREFIX = "FILE_FORGE_"


def env_setting(name: str, default: str = "") -> str:
    """Read a `FILE_FORGE_*` setting from the environment, then from `.env`.

    Args:
        name (str): the setting name without prefix (e.g. "LOG_FILE")
        default (str, optional): value used when the setting is absent. Defaults to "".

    Returns:
        str: the setting value
    """
    key = ENV_PREFIX + name
    if key in os.environ:
        return os.environ[key]
    if ENV_FILE:
        value = dotenv_values(ENV_FILE).get(key)
        if value is not None:
            return value
    return default


class Settings(BaseModel):
    """Configuration settings for one file_forge invocation."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    source: str = Field(default="", description="Directory, file or file:// URL to analyze.")
    output: Path | None = Field(default=None, description="Output file; stdout when unset.")
    name: str = Field(default="", description="Custom name used in the report header.")
    log_file: str = Field(default="", description="Log file path.")
    debug: bool = Field(default=False, description="Enable debug logging.")
    config: Path | None = Field(default=None, description="Configuration file path.")
    save_config: bool = Field(default=False, description="Persist filter flags as defaults.")

    include: list[str] = Field(default_factory=list, description="Include globs.")
    exclude: list[str] = Field(default_factory=list, description="Exclude globs.")
    find: list[str] = Field(default_factory=list, description="Find files containing ANY term.")
    require: list[str] = Field(default_factory=list, description="Find files containing ALL terms.")

    max_size: int = Field(
        default=DEFAULT_MAX_FILE_SIZE,
        ge=0,
        description="Files above are listed but not read.",
    )
    ignore: bool = Field(default=True, description="Respect .gitignore files.")
    skip_artifacts: bool = Field(
        default=True,
        description="Skip dependency files, build artifacts and generated assets.",
    )
    verbose: bool = Field(default=False, description="Include file contents in the report.")
    bulk: bool = Field(default=False, description="Append AI processing instructions to the report.")

    def to_scan_options(self) -> ScanOptions:
        """Build the scanner rule-set from these settings.

        Returns:
            ScanOptions: the frozen rule-set passed to the scanner
        """
        return ScanOptions(
            include=self.include,
            exclude=self.exclude,
            find=self.find,
            require=self.require,
            respect_gitignore=self.ignore,
            skip_artifacts=self.skip_artifacts,
            max_file_size=self.max_size,
            include_content=self.verbose,
        )
