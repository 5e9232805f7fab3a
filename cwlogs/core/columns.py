"""Column discovery for structured (JSON) log lines.

Each line is expected in the ``[timestamp] [stream] <body>`` shape produced
by :func:`cwlogs.core.render.event_to_log_line`. JSON bodies are flattened
and every distinct path becomes a candidate column; columns are ranked by
how many rows carry them.
"""

import json
from typing import Dict, Iterable, List, Optional, Tuple

from cwlogs.core.constants import (
    ELLIPSIS,
    FIXED_COLUMNS,
    MAX_COLUMN_WIDTH,
    MIN_FIXED_COLUMN_WIDTH,
)
from cwlogs.core.flatten import flatten_json
from cwlogs.core.logging import get_logger
from cwlogs.models import ColumnInfo, FormattedOutput

logger = get_logger(__name__)


def _closing_bracket(text: str) -> int:
    """Index of the `]` closing the `[` at ``text[0]``, or -1.

    Nested pairs are skipped, so Lambda stream names such as
    `2024/01/01/[$LATEST]abc` stay whole. Unbalanced text falls back to the
    first `]`.
    """
    depth = 0
    for index, char in enumerate(text):
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return index
    return text.find("]")


def parse_log_line(line: str) -> Tuple[str, str, str]:
    """Split a rendered line into ``(timestamp, stream, body)``.

    Lines that do not start with a bracketed segment yield empty timestamp
    and stream with the whole line as body.
    """
    if not line.startswith("["):
        return "", "", line

    ts_end = line.find("]")
    if ts_end == -1:
        return "", "", line

    timestamp = line[1:ts_end]
    rest = line[ts_end + 1:].strip()

    if rest.startswith("["):
        stream_end = _closing_bracket(rest)
        if stream_end != -1:
            return timestamp, rest[1:stream_end], rest[stream_end + 1:].strip()

    return timestamp, "", rest


def truncate_value(value: str, max_len: int = MAX_COLUMN_WIDTH) -> str:
    """Shorten ``value`` to ``max_len`` characters, ending in ``...`` if cut."""
    if len(value) <= max_len:
        return value
    return value[:max_len - len(ELLIPSIS)] + ELLIPSIS


class ColumnAccumulator:
    """Collects per-column frequency and width across a formatting pass."""

    def __init__(self, width_cap: int = MAX_COLUMN_WIDTH):
        self.width_cap = width_cap
        self.frequency: Dict[str, int] = {}
        self.max_width: Dict[str, int] = {}

    def _widen(self, name: str, value: str) -> None:
        width = min(len(value), self.width_cap)
        self.max_width[name] = max(self.max_width.get(name, 0), width)

    def observe_fixed(self, timestamp: str, log_group: str) -> None:
        """Record widths of the columns every row has."""
        self._widen("timestamp", timestamp)
        self._widen("log_group", log_group)

    def observe(self, row: Dict[str, str]) -> None:
        """Record one row's structured fields."""
        for name, value in row.items():
            self.frequency[name] = self.frequency.get(name, 0) + 1
            self._widen(name, value)

    def columns(self, row_count: int) -> List[ColumnInfo]:
        """Build the final column order.

        ``timestamp`` and ``log_group`` come first; the rest are ordered by
        descending frequency, then name.
        """
        fixed = [
            ColumnInfo(
                name=name,
                frequency=row_count,
                max_width=max(self.max_width.get(name, 0), MIN_FIXED_COLUMN_WIDTH),
            )
            for name in FIXED_COLUMNS
        ]
        others = [
            ColumnInfo(
                name=name,
                frequency=count,
                max_width=max(self.max_width.get(name, 0), len(name)),
            )
            for name, count in self.frequency.items()
            if name not in FIXED_COLUMNS
        ]
        others.sort(key=lambda column: (-column.frequency, column.name))
        return fixed + others


def _structured_fields(body: str) -> Optional[Dict[str, str]]:
    """Flatten a JSON object/array body, or return None for anything else."""
    # Deeply nested bodies exhaust the decoder's recursion limit
    try:
        value = json.loads(body)
        if not isinstance(value, (dict, list)):
            return None
        return flatten_json(value)
    except (ValueError, RecursionError):
        return None


def analyze_json_logs(lines: Iterable[str], fallback_column: Optional[str] = None) -> FormattedOutput:
    """Turn rendered log lines into a column-aligned table model.

    Args:
        lines: Lines in ``[timestamp] [stream] <body>`` form
        fallback_column: When set, bodies that are not a JSON object or
            array are placed whole in this column instead of being dropped

    Returns:
        FormattedOutput whose rows line up with its columns
    """
    accumulator = ColumnAccumulator()
    parsed_rows: List[Dict[str, str]] = []
    fallbacks = 0

    for line in lines:
        timestamp, log_group, body = parse_log_line(line)
        accumulator.observe_fixed(timestamp, log_group)

        fields = _structured_fields(body)
        if fields is None:
            fallbacks += 1
            fields = {fallback_column: body} if fallback_column and body else {}
        # The line's own timestamp and stream always win over payload keys
        fields = {name: value for name, value in fields.items() if name not in FIXED_COLUMNS}
        accumulator.observe(fields)

        row = dict(fields)
        row["timestamp"] = timestamp
        row["log_group"] = log_group
        parsed_rows.append(row)

    columns = accumulator.columns(len(parsed_rows))
    rows = [
        [truncate_value(row.get(column.name, "")) for column in columns]
        for row in parsed_rows
    ]

    logger.debug(
        "logs_analyzed",
        rows=len(rows),
        columns=len(columns),
        unstructured=fallbacks,
    )
    return FormattedOutput(columns=columns, rows=rows)
