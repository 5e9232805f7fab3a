"""Configuration models for the application."""

from typing import Dict, Optional, Literal
from pydantic import BaseModel, Field

from cwlogs.core.constants import DEFAULT_REGION, DEFAULT_OUTPUT, DEFAULT_MAX_EVENTS

class DefaultConfig(BaseModel):
    """Defaults applied when the command line does not say otherwise."""
    region: str = Field(default=DEFAULT_REGION)
    output: Literal["colored", "plain"] = Field(default=DEFAULT_OUTPUT)
    max_events: int = Field(default=DEFAULT_MAX_EVENTS, ge=0)

class ProfileConfig(BaseModel):
    """Per-profile overrides."""
    assume_role: Optional[str] = None
    region: Optional[str] = None

class ConfigRecord(BaseModel):
    """The persisted configuration file."""

    defaults: DefaultConfig = Field(default_factory=DefaultConfig)
    profiles: Dict[str, ProfileConfig] = Field(default_factory=dict)
    aliases: Dict[str, str] = Field(default_factory=dict)
