"""Rendering of log events and column tables to the terminal."""

import json
import re
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Pattern, Tuple

from rich.console import Console
from rich.text import Text

from cwlogs.core.constants import TIMESTAMP_FORMAT, UNKNOWN_TIME
from cwlogs.models import FormattedOutput, LogEvent

CELL_SEPARATOR = " │ "
RULE_SEPARATOR = "─┼─"
RULE_CHAR = "─"

# Applied in order, later styles win on overlap
LEVEL_STYLES = [
    (r"(?i)\b(error|err|fatal|panic)\b", "bright_red"),
    (r"(?i)\b(warn|warning)\b", "bright_yellow"),
    (r"(?i)\b(info|information)\b", "bright_green"),
    (r"(?i)\b(debug|trace)\b", "dim"),
]

MATCH_STYLE = "black on yellow"


def format_timestamp(timestamp: Optional[int]) -> str:
    """Format epoch milliseconds as ``YYYY-MM-DD HH:MM:SS.mmm`` UTC."""
    if timestamp is None:
        return UNKNOWN_TIME
    try:
        moment = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return UNKNOWN_TIME
    return moment.strftime(TIMESTAMP_FORMAT)[:-3]


def event_to_log_line(event: LogEvent) -> str:
    """Render an event as ``[timestamp] [stream] body`` for column analysis.

    JSON bodies are re-serialized compactly so multi-line payloads stay on
    one line.
    """
    body = event.message or ""
    try:
        body = json.dumps(json.loads(body), separators=(",", ":"), ensure_ascii=False)
    except (ValueError, RecursionError):
        # Not JSON, or nested past the decoder's recursion limit
        pass
    return f"[{format_timestamp(event.timestamp)}] [{event.stream_id or ''}] {body}"


def compile_highlight(pattern: Optional[str]) -> Optional[Pattern[str]]:
    """Turn a filter pattern into a literal-match regex for highlighting."""
    if not pattern:
        return None
    return re.compile(re.escape(pattern))


def colorize_log_level(text: Text) -> Text:
    """Style level words (error, warn, info, debug) inside ``text``."""
    for regex, style in LEVEL_STYLES:
        text.highlight_regex(regex, style)
    return text


def render_event(
    event: LogEvent,
    highlight: Optional[Pattern[str]] = None,
    show_stream: bool = True,
    colorize_levels: bool = False,
) -> Text:
    """Build the display line for one event."""
    line = Text()
    line.append("[")
    line.append(format_timestamp(event.timestamp), style="bright_blue")
    line.append("] ")
    if show_stream and event.stream_id:
        line.append("[")
        line.append(event.stream_id, style="cyan")
        line.append("] ")

    message = Text(event.message or "")
    if colorize_levels:
        colorize_log_level(message)
    if highlight is not None:
        message.highlight_regex(highlight, MATCH_STYLE)
    line.append_text(message)
    return line


def print_events(
    events: Iterable[LogEvent],
    console: Console,
    highlight: Optional[Pattern[str]] = None,
    show_stream: bool = True,
    colorize_levels: bool = False,
) -> int:
    """Print events one per line, skipping events without a message.

    Returns:
        Number of lines printed
    """
    printed = 0
    for event in events:
        if event.message is None:
            continue
        console.print(
            render_event(event, highlight, show_stream, colorize_levels),
            soft_wrap=True,
        )
        printed += 1
    return printed


def _table_cells(output: FormattedOutput) -> Tuple[List[str], str, List[List[str]]]:
    """Padded header cells, the rule line and padded row cells."""
    widths = [column.max_width for column in output.columns]
    header = [column.name.ljust(width) for column, width in zip(output.columns, widths)]
    rule = RULE_SEPARATOR.join(RULE_CHAR * width for width in widths)
    rows = [
        [value.ljust(width) for value, width in zip(row, widths)]
        for row in output.rows
    ]
    return header, rule, rows


def _join_cells(cells: List[str], styles: List[Optional[str]]) -> Text:
    line = Text()
    for i, (cell, style) in enumerate(zip(cells, styles)):
        if i:
            line.append(CELL_SEPARATOR)
        line.append(cell, style=style)
    return line


def format_table(output: FormattedOutput) -> List[str]:
    """Lay out a FormattedOutput as plain fixed-width text lines.

    The first line is the header, the second a rule of ``─`` joined by
    ``┼``, then one line per row.
    """
    header, rule, rows = _table_cells(output)
    return [CELL_SEPARATOR.join(header), rule] + [CELL_SEPARATOR.join(cells) for cells in rows]


def print_formatted_table(output: FormattedOutput, console: Console) -> None:
    """Write a FormattedOutput to ``console`` with styling and a summary."""
    header, rule, rows = _table_cells(output)

    console.print(_join_cells(header, ["bold bright_cyan"] * len(header)), soft_wrap=True)
    console.print(Text(rule, style="bright_black"), soft_wrap=True)

    # timestamp and log_group
    row_styles: List[Optional[str]] = ["bright_blue" if i < 2 else None for i in range(len(header))]
    for cells in rows:
        console.print(_join_cells(cells, row_styles), soft_wrap=True)

    console.print()
    console.print(
        f"[bright_yellow]{len(output.columns)}[/bright_yellow] columns, "
        f"[bright_yellow]{len(output.rows)}[/bright_yellow] rows"
    )
