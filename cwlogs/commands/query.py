"""`cwl query` - historical log retrieval."""

from typing import Any, Optional

from rich.console import Console
from rich.markup import escape

from cwlogs.core.columns import analyze_json_logs
from cwlogs.core.render import (
    compile_highlight,
    event_to_log_line,
    format_timestamp,
    print_events,
    print_formatted_table,
)
from cwlogs.core.retrieval import fetch_events
from cwlogs.core.timeparse import parse_time_range

# Column that holds non-JSON messages in table mode
RAW_MESSAGE_COLUMN = "message"


def _label(console: Console, label: str, value: str) -> None:
    console.print(f"[bold bright_blue]{label}[/bold bright_blue] [bright_yellow]{escape(value)}[/bright_yellow]",
                  highlight=False)


def run(
    source: Any,
    console: Console,
    log_group: str,
    since: Optional[str] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
    filter_pattern: Optional[str] = None,
    limit: Optional[int] = None,
    table: bool = False,
    color_levels: bool = False,
) -> int:
    """Query a time window and print the matching events.

    Time options are parsed before anything is fetched.

    Returns:
        Number of events retrieved
    """
    start_time, end_time = parse_time_range(since, start, end)

    _label(console, "Querying logs from:", log_group)
    if start_time is not None:
        _label(console, "Start time:", format_timestamp(start_time))
    if end_time is not None:
        _label(console, "End time:", format_timestamp(end_time))
    if filter_pattern:
        _label(console, "Filter pattern:", filter_pattern)
    _label(console, "Max events:",
           "unlimited (fetching all in time range)" if limit is None else str(limit))

    with console.status("Fetching log events..."):
        events = fetch_events(
            source,
            log_group,
            start_time=start_time,
            end_time=end_time,
            pattern=filter_pattern,
            limit=limit,
        )

    if not events:
        console.print("[yellow]No log events found matching criteria[/yellow]")
        return 0

    console.print(f"[bold bright_green]Found[/bold bright_green] "
                  f"[bold bright_yellow]{len(events)}[/bold bright_yellow] events\n")

    if table:
        lines = [event_to_log_line(event) for event in events if event.message is not None]
        print_formatted_table(analyze_json_logs(lines, fallback_column=RAW_MESSAGE_COLUMN), console)
    else:
        print_events(events, console, highlight=compile_highlight(filter_pattern),
                     colorize_levels=color_levels)

    console.print(f"\n[bold bright_green]✓[/bold bright_green] "
                  f"[bright_yellow]{len(events)}[/bright_yellow] total events displayed")
    return len(events)
