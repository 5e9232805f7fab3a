"""Shared fixtures: in-memory page sources standing in for CloudWatch."""

import io
from typing import List, Optional

import pytest
from rich.console import Console

from cwlogs.core.logging import setup_logging
from cwlogs.models import GroupPage, LogEvent, PageRequest, PageResponse


def make_events(count: int, start: int = 1_700_000_000_000, stream: str = "stream-a") -> List[LogEvent]:
    """Events with consecutive millisecond timestamps."""
    return [
        LogEvent(timestamp=start + i, stream_id=stream, message=f"event {i}")
        for i in range(count)
    ]


class PagedSource:
    """Serves a fixed event list honouring page_size and continuation tokens."""

    def __init__(self, events: List[LogEvent], max_page: Optional[int] = None):
        self.events = list(events)
        self.max_page = max_page
        self.requests: List[PageRequest] = []

    def fetch_page(self, request: PageRequest) -> PageResponse:
        self.requests.append(request)
        offset = int(request.continuation) if request.continuation else 0
        size = request.page_size
        if self.max_page is not None:
            size = min(size, self.max_page)
        chunk = self.events[offset:offset + size]
        end = offset + len(chunk)
        next_token = str(end) if end < len(self.events) else None
        return PageResponse(events=chunk, next_token=next_token)


class ScriptedSource:
    """Returns pre-built responses in order; exceptions in the script are raised."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.requests: List[PageRequest] = []

    def fetch_page(self, request: PageRequest) -> PageResponse:
        self.requests.append(request)
        if not self.responses:
            raise RuntimeError("script exhausted")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class GroupSource:
    """Serves group names in pages of ``page_size``."""

    def __init__(self, names: List[str], page_size: int = 2):
        self.names = names
        self.page_size = page_size
        self.calls = []

    def list_groups_page(self, prefix=None, token=None) -> GroupPage:
        self.calls.append((prefix, token))
        names = [n for n in self.names if not prefix or n.startswith(prefix)]
        offset = int(token) if token else 0
        chunk = names[offset:offset + self.page_size]
        end = offset + len(chunk)
        return GroupPage(names=chunk, next_token=str(end) if end < len(names) else None)


@pytest.fixture(scope="session", autouse=True)
def quiet_logging():
    """Route structlog through stdlib at WARNING, as the CLI does."""
    setup_logging("WARNING")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep CWL_* variables from the developer's shell out of tests."""
    for name in ("CWL_DEFAULTS__REGION", "CWL_DEFAULTS__MAX_EVENTS", "CWL_DEFAULTS__OUTPUT", "CWL_CONFIG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def console_output():
    """A plain rich Console writing into a StringIO buffer."""
    buffer = io.StringIO()
    console = Console(file=buffer, color_system=None, width=200, highlight=False)
    return console, buffer
