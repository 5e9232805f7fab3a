"""`cwl tail` - recent events, or a live stream with --follow."""

import signal
import threading
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape

from cwlogs.core.constants import SNAPSHOT_LIMIT, SNAPSHOT_LOOKBACK_MS
from cwlogs.core.render import compile_highlight, print_events
from cwlogs.core.retrieval import LiveTailer, fetch_events
from cwlogs.core.timeparse import now_ms


def _install_stop_handler(tailer: LiveTailer):
    """Route Ctrl+C to ``tailer.stop()``; returns the previous handler."""
    if threading.current_thread() is not threading.main_thread():
        return None

    def _handler(signum, frame):
        tailer.stop()

    return signal.signal(signal.SIGINT, _handler)


def follow(
    source: Any,
    console: Console,
    log_group: str,
    filter_pattern: Optional[str] = None,
    highlight: bool = False,
    color_levels: bool = False,
    **tailer_kwargs: Any,
) -> int:
    """Stream new events until interrupted.

    Returns:
        Number of events printed
    """
    pattern = compile_highlight(filter_pattern) if highlight else None
    tailer = LiveTailer(source, log_group, filter_pattern, **tailer_kwargs)
    previous = _install_stop_handler(tailer)
    status = console.status("Waiting for logs...")
    status.start()
    printed = 0
    try:
        for event in tailer:
            if printed == 0:
                status.stop()
            printed += print_events([event], console, highlight=pattern, show_stream=False,
                                    colorize_levels=color_levels)
    finally:
        status.stop()
        if previous is not None:
            signal.signal(signal.SIGINT, previous)

    console.print(f"\n[bright_blue]Stopped tailing[/bright_blue] {escape(log_group)}", highlight=False)
    return printed


def snapshot(
    source: Any,
    console: Console,
    log_group: str,
    filter_pattern: Optional[str] = None,
    highlight: bool = False,
    color_levels: bool = False,
) -> int:
    """Print up to the last 100 events from the past five minutes.

    Returns:
        Number of events printed
    """
    events = fetch_events(
        source,
        log_group,
        start_time=now_ms() - SNAPSHOT_LOOKBACK_MS,
        pattern=filter_pattern,
        limit=SNAPSHOT_LIMIT,
    )
    if not events:
        console.print("[yellow]No log events found[/yellow]")
        return 0

    pattern = compile_highlight(filter_pattern) if highlight else None
    return print_events(events, console, highlight=pattern, show_stream=False,
                        colorize_levels=color_levels)


def run(
    source: Any,
    console: Console,
    log_group: str,
    follow_mode: bool = False,
    filter_pattern: Optional[str] = None,
    highlight: bool = False,
    color_levels: bool = False,
) -> int:
    console.print(f"[bold bright_blue]Tailing logs from:[/bold bright_blue] "
                  f"[bright_yellow]{escape(log_group)}[/bright_yellow]", highlight=False)
    if filter_pattern:
        console.print(f"[bold bright_blue]Filter pattern:[/bold bright_blue] "
                      f"[bright_yellow]{escape(filter_pattern)}[/bright_yellow]", highlight=False)

    if follow_mode:
        return follow(source, console, log_group, filter_pattern, highlight, color_levels)
    return snapshot(source, console, log_group, filter_pattern, highlight, color_levels)
