"""Models package for data validation and serialization."""

from .config import ConfigRecord, DefaultConfig, ProfileConfig
from .data import (
    LogEvent,
    PageRequest,
    PageResponse,
    GroupPage,
    ColumnInfo,
    FormattedOutput
)

__all__ = [
    'ConfigRecord',
    'DefaultConfig',
    'ProfileConfig',
    'LogEvent',
    'PageRequest',
    'PageResponse',
    'GroupPage',
    'ColumnInfo',
    'FormattedOutput'
]
