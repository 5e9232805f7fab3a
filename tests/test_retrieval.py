"""Tests for bounded queries and group listing."""

import pytest

from conftest import GroupSource, PagedSource, ScriptedSource, make_events
from cwlogs.core.constants import MAX_EVENTS_PER_REQUEST
from cwlogs.core.errors import RetrievalError, ValidationError
from cwlogs.core.retrieval import fetch_events, filter_groups, list_log_groups
from cwlogs.models import LogEvent, PageResponse


@pytest.mark.parametrize("limit,available,page", [
    (5, 20, 3),
    (20, 5, 3),
    (7, 7, 7),
    (10, 10, 4),
    (1, 50, 50),
])
def test_limit_returns_min_of_limit_and_available(limit, available, page):
    """Exactly min(limit, available) events come back, in order."""
    events = make_events(available)
    source = PagedSource(events, max_page=page)

    result = fetch_events(source, "group", limit=limit)

    assert result == events[:min(limit, available)]

def test_no_limit_walks_every_page():
    """Without a limit all pages are fetched until the token runs out."""
    events = make_events(25)
    source = PagedSource(events, max_page=10)

    result = fetch_events(source, "group")

    assert result == events
    assert len(source.requests) == 3
    assert all(r.page_size == MAX_EVENTS_PER_REQUEST for r in source.requests)
    assert [r.continuation for r in source.requests] == [None, "10", "20"]

def test_page_size_tracks_remaining():
    """Each page asks only for what is still needed."""
    source = PagedSource(make_events(100), max_page=4)

    fetch_events(source, "group", limit=10)

    assert [r.page_size for r in source.requests] == [10, 6, 2]

def test_page_size_capped_at_store_maximum():
    source = PagedSource(make_events(3))

    fetch_events(source, "group", limit=25_000)

    assert source.requests[0].page_size == MAX_EVENTS_PER_REQUEST

def test_no_request_after_limit_reached():
    """A full page that satisfies the limit ends the query even with a token."""
    source = ScriptedSource([
        PageResponse(events=make_events(5), next_token="more"),
    ])

    result = fetch_events(source, "group", limit=5)

    assert len(result) == 5
    assert len(source.requests) == 1

def test_overfull_page_truncates_tail_only():
    """Extra events from the store are dropped from the end."""
    events = make_events(8)
    source = ScriptedSource([PageResponse(events=events, next_token="more")])

    result = fetch_events(source, "group", limit=3)

    assert result == events[:3]

def test_zero_limit_issues_no_request():
    source = ScriptedSource([])

    assert fetch_events(source, "group", limit=0) == []
    assert source.requests == []

def test_negative_limit_rejected():
    with pytest.raises(ValueError):
        fetch_events(ScriptedSource([]), "group", limit=-1)

def test_terminates_on_missing_token():
    """An empty continuation token ends the query."""
    source = ScriptedSource([
        PageResponse(events=make_events(2), next_token="t1"),
        PageResponse(events=[], next_token=None),
    ])

    result = fetch_events(source, "group", limit=100)

    assert len(result) == 2
    assert len(source.requests) == 2

def test_request_carries_window_and_pattern():
    source = PagedSource(make_events(1))

    fetch_events(source, "/aws/lambda/api", start_time=1000, end_time=2000, pattern="ERROR")

    request = source.requests[0]
    assert request.group == "/aws/lambda/api"
    assert request.start_time == 1000
    assert request.end_time == 2000
    assert request.pattern == "ERROR"

def test_failure_aborts_with_group_context():
    """A failing page discards partial results and names the group."""
    source = ScriptedSource([
        PageResponse(events=make_events(3), next_token="t1"),
        ConnectionError("connection reset"),
    ])

    with pytest.raises(RetrievalError) as excinfo:
        fetch_events(source, "/aws/lambda/api")

    error = excinfo.value
    assert error.group == "/aws/lambda/api"
    assert "/aws/lambda/api" in str(error)
    assert error.details["operation"] == "FilterLogEvents"
    assert isinstance(error.__cause__, ConnectionError)

def test_retrieval_error_from_source_passes_through():
    original = RetrievalError("denied", group="g", operation="FilterLogEvents")
    source = ScriptedSource([original])

    with pytest.raises(RetrievalError) as excinfo:
        fetch_events(source, "g")

    assert excinfo.value is original

def test_events_without_fields_are_kept():
    events = [LogEvent(), LogEvent(message="x")]
    source = ScriptedSource([PageResponse(events=events)])

    assert fetch_events(source, "g") == events

def test_list_log_groups_aggregates_pages():
    names = ["/aws/a", "/aws/b", "/aws/c", "/ecs/d", "/ecs/e"]
    source = GroupSource(names, page_size=2)

    assert list_log_groups(source) == names
    assert source.calls == [(None, None), (None, "2"), (None, "4")]

def test_list_log_groups_with_prefix():
    source = GroupSource(["/aws/a", "/ecs/b", "/aws/c"], page_size=1)

    assert list_log_groups(source, prefix="/aws") == ["/aws/a", "/aws/c"]

def test_list_log_groups_wraps_failures():
    class Broken:
        def list_groups_page(self, prefix=None, token=None):
            raise TimeoutError("slow")

    with pytest.raises(RetrievalError) as excinfo:
        list_log_groups(Broken(), prefix="/aws")

    assert excinfo.value.details["operation"] == "DescribeLogGroups"
    assert excinfo.value.details["prefix"] == "/aws"

def test_filter_groups_by_regex():
    names = ["/aws/lambda/api", "/aws/lambda/worker", "/ecs/api"]

    assert filter_groups(names, r"api$") == ["/aws/lambda/api", "/ecs/api"]
    assert filter_groups(names, None) == names

def test_filter_groups_invalid_regex():
    with pytest.raises(ValidationError):
        filter_groups(["a"], "(")

def test_page_without_token_is_exhausted():
    assert PageResponse(events=make_events(1)).exhausted
    assert not PageResponse(events=[], next_token="t").exhausted
