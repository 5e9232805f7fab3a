"""Module for configuration management."""

import os
from typing import Any, Dict, Optional, Union
from pathlib import Path

from dynaconf import Dynaconf, Validator, ValidationError as DynaconfValidationError
from dynaconf.loaders import toml_loader
from pydantic import ValidationError as PydanticValidationError

from cwlogs.core.constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_EVENTS,
    DEFAULT_OUTPUT,
    DEFAULT_REGION,
    OUTPUT_MODES,
)
from cwlogs.core.errors import ConfigError
from cwlogs.models import ConfigRecord, ProfileConfig


def default_config_path() -> Path:
    """Location of the config file, honouring ``CWL_CONFIG``."""
    override = os.environ.get("CWL_CONFIG")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "cwl" / "config.toml"


def _plain(value: Any) -> Any:
    """Convert dynaconf boxes into plain dicts and lists."""
    if hasattr(value, "to_dict"):
        value = value.to_dict()
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


class Settings:
    """Application settings backed by dynaconf.

    The file holds three tables::

        [defaults]
        region = "us-east-1"
        output = "colored"
        max_events = 1000

        [profiles.prod]
        region = "eu-west-1"

        [aliases]
        api = "/aws/lambda/api-handler"

    Environment variables prefixed ``CWL_`` override file values, e.g.
    ``CWL_DEFAULTS__REGION``.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize settings.

        Args:
            config_path: Optional path to the TOML config file

        Raises:
            ConfigError: If the file cannot be read or fails validation
        """
        self.path = Path(config_path).expanduser() if config_path else default_config_path()

        try:
            self.settings = Dynaconf(
                envvar_prefix="CWL",
                settings_files=[str(self.path)],
                validators=[
                    Validator('defaults.region', default=DEFAULT_REGION),
                    Validator('defaults.output', default=DEFAULT_OUTPUT, is_in=OUTPUT_MODES),
                    Validator('defaults.max_events', default=DEFAULT_MAX_EVENTS, is_type_of=int, gte=0),
                    Validator('logging.level', default=DEFAULT_LOG_LEVEL),
                ]
            )
            self.settings.validators.validate()
        except DynaconfValidationError as e:
            raise ConfigError(
                "Configuration validation failed",
                details={"path": str(self.path), "errors": str(e)}
            ) from e
        except Exception as e:
            raise ConfigError(
                "Failed to load configuration",
                details={"path": str(self.path), "error": str(e)}
            ) from e

        self.record = self._build_record()

    def _build_record(self) -> ConfigRecord:
        defaults = _plain(self.settings.get("defaults", {}))
        try:
            return ConfigRecord(
                defaults={str(k).lower(): v for k, v in defaults.items()},
                profiles=_plain(self.settings.get("profiles", {})),
                aliases=_plain(self.settings.get("aliases", {})),
            )
        except PydanticValidationError as e:
            raise ConfigError(
                "Invalid configuration values",
                details={"path": str(self.path), "errors": str(e)}
            ) from e

    @property
    def region(self) -> str:
        return self.record.defaults.region

    @property
    def output(self) -> str:
        return self.record.defaults.output

    @property
    def max_events(self) -> int:
        return self.record.defaults.max_events

    @property
    def log_level(self) -> str:
        return str(self.settings.get("logging.level", DEFAULT_LOG_LEVEL))

    def resolve_group(self, name: str) -> str:
        """Return the log group an alias points to, or ``name`` unchanged."""
        return self.record.aliases.get(name, name)

    def profile(self, name: Optional[str]) -> Optional[ProfileConfig]:
        if not name:
            return None
        return self.record.profiles.get(name)

    def profile_region(self, name: Optional[str]) -> Optional[str]:
        """Region configured for profile ``name``, if any."""
        profile = self.profile(name)
        return profile.region if profile else None

    def effective_region(self, profile: Optional[str] = None, region: Optional[str] = None) -> str:
        """Pick the region: explicit value, then profile, then defaults."""
        return region or self.profile_region(profile) or self.region

    def add_alias(self, name: str, group: str) -> None:
        """Map ``name`` to ``group`` in the in-memory record."""
        self.record.aliases[name] = group

    def to_dict(self) -> Dict[str, Any]:
        return self.record.model_dump(exclude_none=True)

    def save(self) -> None:
        """Write the current record back to the config file.

        Raises:
            ConfigError: If the file cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            toml_loader.write(str(self.path), self.to_dict(), merge=False)
        except Exception as e:
            raise ConfigError(
                "Failed to save configuration",
                details={"path": str(self.path), "error": str(e)}
            ) from e


def load_config(config_path: Optional[Union[str, Path]] = None) -> Settings:
    """Load application configuration.

    A missing file is not an error; defaults apply.

    Raises:
        ConfigError: If configuration loading fails
    """
    return Settings(config_path)
