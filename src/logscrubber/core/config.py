"""
Configuration loading and resolution.

Settings come from two places: command-line flags and an optional config
file (JSON or YAML). Flags win over the file; built-in defaults fill in
whatever neither provides.
"""

from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from logscrubber.core.constants import (
    AUDIT_TYPE_CSV,
    AUDIT_TYPES,
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_FILE,
    DEFAULT_MAX_FILE_SIZE,
    OVERWRITE_ACTIONS,
    OVERWRITE_PROMPT,
    SCRUB_LEVEL_HIGH,
    SCRUB_LEVEL_LOW,
    SCRUB_LEVEL_MEDIUM,
)
from logscrubber.core.exceptions import ConfigurationError
from logscrubber.core.schemas import CONFIG_SCHEMA
from logscrubber.utils.files import default_audit_path, default_output_path
from logscrubber.utils.validator import validate_document

logger = logging.getLogger(__name__)

_SIZE_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)\s*(B|KB|MB|GB|TB)?$")
_SIZE_UNITS = {
    "B": 1,
    "KB": 1024,
    "MB": 1024**2,
    "GB": 1024**3,
    "TB": 1024**4,
}


class _Section(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class FileSettings(_Section):
    input_file: str = Field(default="", alias="InputFile")
    output_file: str = Field(default="", alias="OutputFile")
    audit_file: str = Field(default="", alias="AuditFile")
    audit_file_type: str = Field(default="", alias="AuditFileType")
    compress_output_file: bool = Field(default=False, alias="CompressOutputFile")
    overwrite_action: str = Field(default="", alias="OverwriteAction")


class ScrubSettings(_Section):
    scrub_level: int = Field(default=0, alias="ScrubLevel")
    alias_domains: bool = Field(default=True, alias="AliasDomains")


class OutputSettings(_Section):
    verbose: bool = Field(default=False, alias="Verbose")


class ProcessingSettings(_Section):
    max_input_file_size: str = Field(default="", alias="MaxInputFileSize")


class Config(_Section):
    file_settings: FileSettings = Field(default_factory=FileSettings, alias="FileSettings")
    scrub_settings: ScrubSettings = Field(default_factory=ScrubSettings, alias="ScrubSettings")
    output_settings: OutputSettings = Field(default_factory=OutputSettings, alias="OutputSettings")
    processing_settings: ProcessingSettings = Field(
        default_factory=ProcessingSettings, alias="ProcessingSettings"
    )


class CLIFlags(BaseModel):
    """Raw command-line values; empty/zero/False means "not given"."""

    input_file: str = ""
    output_file: str = ""
    level: int = 0
    config_file: str = ""
    audit_file: str = ""
    audit_type: str = ""
    overwrite_action: str = ""
    max_file_size: str = ""
    verbose: bool = False
    dry_run: bool = False
    compress: bool = False


class ResolvedSettings(BaseModel):
    input_path: str = ""
    output_path: str = ""
    audit_path: str = ""
    audit_file_type: str = AUDIT_TYPE_CSV
    scrub_level: int = 0
    alias_domains: bool = True
    verbose: bool = False
    dry_run: bool = False
    compress_output_file: bool = False
    overwrite_action: str = OVERWRITE_PROMPT
    max_input_file_size: int = DEFAULT_MAX_FILE_SIZE


def _read_document(config_path: str) -> Any:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.lower().endswith((".yaml", ".yml")):
                return yaml.safe_load(f) or {}
            return json.load(f)
    except OSError as e:
        raise ConfigurationError(f"failed to open config file: {e}", path=config_path) from e
    except (ValueError, yaml.YAMLError) as e:
        raise ConfigurationError(f"failed to parse config file: {e}", path=config_path) from e


def load_config(config_path: str) -> Config:
    """Load, schema-check and parse a config file."""
    document = _read_document(config_path)
    validate_document(document, CONFIG_SCHEMA, where=f"Config file '{config_path}'")
    try:
        return Config.model_validate(document)
    except ValidationError as e:
        raise ConfigurationError(f"invalid config file '{config_path}': {e}", path=config_path) from e


def get_config_path(explicit_path: str = "") -> Tuple[str, bool]:
    """
    Return the config path to use and whether the user asked for it.

    An explicit flag wins, then the LOG_SCRUBBER_CONFIG environment variable,
    then the default file name in the working directory.
    """
    if explicit_path:
        return explicit_path, True
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return env_path, True
    return DEFAULT_CONFIG_FILE, False


def find_config(explicit_path: str = "") -> Tuple[Optional[Config], str]:
    """Load the config file if there is one; a missing default is not an error."""
    config_path, user_specified = get_config_path(explicit_path)
    if os.path.exists(config_path):
        logger.info("Using config file at %s", config_path)
        return load_config(config_path), config_path
    if user_specified:
        raise ConfigurationError(
            f"specified config file '{config_path}' does not exist", path=config_path
        )
    return None, config_path


def parse_file_size(size_str: str) -> int:
    """Parse human readable sizes such as '150MB' or '1.5GB' (1024-based)."""
    if not size_str:
        return DEFAULT_MAX_FILE_SIZE

    match = _SIZE_PATTERN.match(size_str.strip().upper())
    if not match:
        raise ValueError(
            f"invalid file size format: {size_str} (expected format like '150MB', '1GB', etc.)"
        )

    size = float(match.group(1))
    unit = match.group(2) or "B"
    return int(size * _SIZE_UNITS[unit])


def format_file_size(num_bytes: int) -> str:
    unit = 1024
    if num_bytes < unit:
        return f"{num_bytes} B"
    div, exp = unit, 0
    n = num_bytes // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{num_bytes / div:.1f} {'KMGTPE'[exp]}B"


def resolve_settings(flags: CLIFlags, config: Optional[Config] = None) -> ResolvedSettings:
    """Merge flags over config-file values over defaults."""
    config = config or Config()
    files = config.file_settings

    settings = ResolvedSettings()
    settings.input_path = flags.input_file or files.input_file
    settings.scrub_level = flags.level or config.scrub_settings.scrub_level
    settings.alias_domains = config.scrub_settings.alias_domains
    settings.verbose = flags.verbose or config.output_settings.verbose
    settings.dry_run = flags.dry_run
    settings.compress_output_file = flags.compress or files.compress_output_file
    settings.audit_file_type = (flags.audit_type or files.audit_file_type or AUDIT_TYPE_CSV).lower()
    settings.overwrite_action = (
        flags.overwrite_action or files.overwrite_action or OVERWRITE_PROMPT
    ).lower()

    max_size = flags.max_file_size or config.processing_settings.max_input_file_size
    try:
        settings.max_input_file_size = parse_file_size(max_size)
    except ValueError as e:
        logger.warning("%s; using default of %s", e, format_file_size(DEFAULT_MAX_FILE_SIZE))
        settings.max_input_file_size = DEFAULT_MAX_FILE_SIZE

    settings.output_path = flags.output_file or files.output_file
    settings.audit_path = flags.audit_file or files.audit_file
    if settings.input_path:
        if not settings.output_path:
            settings.output_path = default_output_path(
                settings.input_path, settings.compress_output_file
            )
        if not settings.audit_path:
            settings.audit_path = default_audit_path(
                settings.input_path, settings.audit_file_type
            )

    return settings


def validate_settings(settings: ResolvedSettings) -> None:
    if not settings.input_path:
        raise ConfigurationError("input file path is required")

    if settings.scrub_level < SCRUB_LEVEL_LOW or settings.scrub_level > SCRUB_LEVEL_HIGH:
        raise ConfigurationError(
            f"scrubbing level must be {SCRUB_LEVEL_LOW}, {SCRUB_LEVEL_MEDIUM}, or {SCRUB_LEVEL_HIGH}"
        )

    if settings.overwrite_action not in OVERWRITE_ACTIONS:
        raise ConfigurationError(
            f"overwrite action must be one of: {', '.join(OVERWRITE_ACTIONS)}"
        )

    if settings.audit_file_type not in AUDIT_TYPES:
        raise ConfigurationError(f"audit file type must be one of: {', '.join(AUDIT_TYPES)}")

    if not os.path.exists(settings.input_path):
        raise ConfigurationError(
            f"input file '{settings.input_path}' does not exist", path=settings.input_path
        )

    try:
        file_size = os.path.getsize(settings.input_path)
    except OSError as e:
        raise ConfigurationError(
            f"failed to get file info for '{settings.input_path}': {e}",
            path=settings.input_path,
        ) from e

    if file_size > settings.max_input_file_size:
        raise ConfigurationError(
            f"input file '{settings.input_path}' size ({format_file_size(file_size)}) exceeds "
            f"maximum allowed size ({format_file_size(settings.max_input_file_size)}). "
            "Use --max-file-size or config setting to override",
            path=settings.input_path,
        )
