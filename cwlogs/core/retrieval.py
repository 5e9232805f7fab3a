"""Module for walking paged results from the log store.

A *source* is any object with the page methods of
:class:`cwlogs.core.client.CloudWatchLogsClient`:

- ``fetch_page(PageRequest) -> PageResponse``
- ``list_groups_page(prefix, token) -> GroupPage``

Three access patterns are built on top of it: bounded historical queries
(:func:`fetch_events`), live tailing (:class:`LiveTailer`) and group listing
(:func:`list_log_groups`).
"""

import re
import threading
from enum import Enum
from typing import Any, Callable, Iterator, List, Optional

from cwlogs.core.constants import (
    MAX_EVENTS_PER_REQUEST,
    TAIL_IDLE_INTERVAL_SECONDS,
    TAIL_LOOKBACK_MS,
)
from cwlogs.core.errors import CallbackError, CwlError, RetrievalError, ValidationError
from cwlogs.core.logging import get_logger, log_duration
from cwlogs.core.timeparse import now_ms
from cwlogs.models import LogEvent, PageRequest, PageResponse

logger = get_logger(__name__)


def _fetch_page(source: Any, request: PageRequest) -> PageResponse:
    """Fetch one page, attaching the group name to any failure."""
    try:
        response = source.fetch_page(request)
    except CwlError:
        raise
    except Exception as e:
        raise RetrievalError(
            f"Failed to get log events for group: {request.group}",
            group=request.group,
            operation="FilterLogEvents",
            details={"error": str(e)},
        ) from e

    logger.debug(
        "page_fetched",
        group=request.group,
        requested=request.page_size,
        events=len(response.events),
        has_more=response.next_token is not None,
    )
    return response


@log_duration(logger)
def fetch_events(
    source: Any,
    group: str,
    start_time: Optional[int] = None,
    end_time: Optional[int] = None,
    pattern: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[LogEvent]:
    """Run a one-shot historical query.

    Pages are requested until the window is exhausted or ``limit`` events
    have been collected; the result is cut to exactly ``limit`` by dropping
    the tail. No request is issued once the limit is met.

    Args:
        source: Page source
        group: Log group name
        start_time: Inclusive window start in epoch milliseconds
        end_time: Exclusive window end in epoch milliseconds
        pattern: Optional store-side filter pattern
        limit: Maximum number of events, or None for no limit

    Returns:
        Events in the order the store returned them

    Raises:
        RetrievalError: If any page fetch fails; nothing is returned then
        ValueError: If ``limit`` is negative
    """
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    events: List[LogEvent] = []
    next_token: Optional[str] = None

    while True:
        if limit is not None:
            remaining = limit - len(events)
            if remaining <= 0:
                break
            page_size = min(remaining, MAX_EVENTS_PER_REQUEST)
        else:
            page_size = MAX_EVENTS_PER_REQUEST

        request = PageRequest(
            group=group,
            start_time=start_time,
            end_time=end_time,
            pattern=pattern,
            page_size=page_size,
            continuation=next_token,
        )
        response = _fetch_page(source, request)
        events.extend(response.events)

        if limit is not None and len(events) >= limit:
            del events[limit:]
            break

        if response.exhausted:
            break
        next_token = response.next_token

    return events


class TailAction(Enum):
    """What a tail callback wants to happen next."""
    CONTINUE = "continue"
    STOP = "stop"


class LiveTailer:
    """Iterator over new events of a log group, polling until stopped.

    The tailer keeps a watermark one millisecond past the newest timestamp
    it has delivered and uses it as the start of every following request,
    so an event is not delivered twice. Distinct events that share an
    already-delivered millisecond are skipped as a consequence.

    While the store hands back continuation tokens the tailer keeps
    fetching without pause; once a page arrives without one it waits
    ``idle_interval`` seconds before polling again.

    Example::

        tailer = LiveTailer(client, "/aws/lambda/api")
        for event in tailer:
            print(event.message)
            if done:
                tailer.stop()
    """

    def __init__(
        self,
        source: Any,
        group: str,
        pattern: Optional[str] = None,
        *,
        idle_interval: float = TAIL_IDLE_INTERVAL_SECONDS,
        lookback_ms: int = TAIL_LOOKBACK_MS,
        clock: Optional[Callable[[], int]] = None,
        sleep: Optional[Callable[[float], Any]] = None,
    ):
        """Initialize the tailer.

        Args:
            source: Page source
            group: Log group name
            pattern: Optional store-side filter pattern
            idle_interval: Seconds to wait after catching up
            lookback_ms: How far back the first poll reaches
            clock: Returns current epoch milliseconds
            sleep: Replacement for the idle wait, mainly for tests
        """
        self.source = source
        self.group = group
        self.pattern = pattern
        self.idle_interval = idle_interval
        self.lookback_ms = lookback_ms
        self._clock = clock or now_ms
        self._sleep = sleep

        self.last_event_time: Optional[int] = None
        self.next_token: Optional[str] = None
        self.delivered = 0
        self._stop = threading.Event()

    def stop(self) -> None:
        """Ask the tailer to finish; safe to call from a signal handler."""
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def build_request(self) -> PageRequest:
        """Request for the next poll cycle."""
        if self.last_event_time is not None:
            start_time = self.last_event_time
        else:
            start_time = self._clock() - self.lookback_ms
        return PageRequest(
            group=self.group,
            start_time=start_time,
            pattern=self.pattern,
            page_size=MAX_EVENTS_PER_REQUEST,
            continuation=self.next_token,
        )

    def _advance(self, event: LogEvent) -> None:
        if event.timestamp is None:
            return
        candidate = event.timestamp + 1
        if self.last_event_time is None or candidate > self.last_event_time:
            self.last_event_time = candidate

    def _idle(self) -> None:
        logger.debug("tail_idle", group=self.group, seconds=self.idle_interval)
        if self._sleep is not None:
            self._sleep(self.idle_interval)
        else:
            # Returns early when stop() is called
            self._stop.wait(self.idle_interval)

    def __iter__(self) -> Iterator[LogEvent]:
        while not self.stopped:
            response = _fetch_page(self.source, self.build_request())

            for event in response.events:
                if self.stopped:
                    break
                self._advance(event)
                self.delivered += 1
                yield event

            self.next_token = response.next_token
            if response.exhausted and not self.stopped:
                self._idle()

        logger.debug("tail_stopped", group=self.group, delivered=self.delivered)


def tail_log_events(
    source: Any,
    group: str,
    pattern: Optional[str],
    callback: Callable[[LogEvent], Optional[TailAction]],
    **tailer_kwargs: Any,
) -> int:
    """Deliver tailed events to ``callback`` until it returns ``TailAction.STOP``.

    Returns:
        Number of events handed to the callback

    Raises:
        CallbackError: If the callback raises
        RetrievalError: If a poll fails
    """
    tailer = LiveTailer(source, group, pattern, **tailer_kwargs)
    for event in tailer:
        try:
            action = callback(event)
        except Exception as e:
            raise CallbackError(
                f"Tail consumer failed for group: {group}",
                details={"group": group, "error": str(e)},
            ) from e
        if action is TailAction.STOP:
            tailer.stop()
    return tailer.delivered


def list_log_groups(source: Any, prefix: Optional[str] = None) -> List[str]:
    """Collect every log group name, following continuation tokens.

    Raises:
        RetrievalError: If any page fetch fails
    """
    names: List[str] = []
    token: Optional[str] = None

    while True:
        try:
            page = source.list_groups_page(prefix=prefix, token=token)
        except CwlError:
            raise
        except Exception as e:
            raise RetrievalError(
                "Failed to list log groups",
                operation="DescribeLogGroups",
                details={"prefix": prefix, "error": str(e)},
            ) from e

        names.extend(page.names)
        token = page.next_token
        if token is None:
            break

    logger.debug("groups_listed", prefix=prefix, count=len(names))
    return names


def filter_groups(names: List[str], pattern: Optional[str]) -> List[str]:
    """Keep names matching the regular expression ``pattern``.

    Raises:
        ValidationError: If ``pattern`` is not a valid regex
    """
    if not pattern:
        return list(names)
    try:
        regex = re.compile(pattern)
    except re.error as e:
        raise ValidationError(
            f"Invalid log group filter: {pattern}",
            details={"error": str(e)},
        ) from e
    return [name for name in names if regex.search(name)]
