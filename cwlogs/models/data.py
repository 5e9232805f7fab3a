"""Module containing Pydantic models for log retrieval and formatting."""

from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from cwlogs.core.constants import MAX_EVENTS_PER_REQUEST

class LogEvent(BaseModel):
    """A single event returned by the log store."""

    timestamp: Optional[int] = None  # milliseconds since epoch
    stream_id: Optional[str] = None
    message: Optional[str] = None

    model_config = ConfigDict(frozen=True)

class PageRequest(BaseModel):
    """Parameters for one page fetch."""

    group: str
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    pattern: Optional[str] = None
    page_size: int = Field(default=MAX_EVENTS_PER_REQUEST, gt=0, le=MAX_EVENTS_PER_REQUEST)
    continuation: Optional[str] = None

class PageResponse(BaseModel):
    """One page of events plus the token to resume from, if any."""

    events: List[LogEvent] = Field(default_factory=list)
    next_token: Optional[str] = None

    @property
    def exhausted(self) -> bool:
        return self.next_token is None

class GroupPage(BaseModel):
    """One page of log group names."""

    names: List[str] = Field(default_factory=list)
    next_token: Optional[str] = None

class ColumnInfo(BaseModel):
    """A discovered table column."""

    name: str
    frequency: int
    max_width: int

class FormattedOutput(BaseModel):
    """Column schema plus rows aligned to it."""

    columns: List[ColumnInfo] = Field(default_factory=list)
    rows: List[List[str]] = Field(default_factory=list)

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]
