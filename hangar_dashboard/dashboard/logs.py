"""Container log parsing and level classification."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


class LogLevel(str, Enum):
    ERROR = "error"
    WARN = "warn"
    INFO = "info"


# First match wins, checked in order.
_LEVEL_MARKERS: Tuple[Tuple[LogLevel, Tuple[str, ...]], ...] = (
    (LogLevel.ERROR, ("ERROR", "FAILED")),
    (LogLevel.WARN, ("WARN", "WARNING")),
)


@dataclass(frozen=True)
class LogLine:
    timestamp: str
    message: str
    level: LogLevel

    @property
    def display_timestamp(self) -> str:
        return format_timestamp(self.timestamp)


def parse_log_line(line: str) -> Tuple[str, str]:
    """Split *line* into ``(timestamp, message)``.

    A leading token ending in ``Z`` is an ISO-8601 UTC timestamp and the
    trimmed remainder is the message.  Anything else has no timestamp and
    the whole line is the message.
    """
    head, sep, rest = line.partition(" ")
    if sep and head.endswith("Z"):
        return head, rest.strip()
    return "", line


def format_timestamp(timestamp: str) -> str:
    """Drop fractional seconds (everything from the first ``.``)."""
    return timestamp.split(".", 1)[0]


def classify_level(message: str) -> LogLevel:
    upper = message.upper()
    for level, markers in _LEVEL_MARKERS:
        if any(marker in upper for marker in markers):
            return level
    return LogLevel.INFO


def split_lines(text: str) -> List[str]:
    """Split *text* on ``\\n`` only, dropping one trailing ``\\r`` per line.

    Other Unicode line separators are ordinary characters here, and a final
    newline does not produce an empty last line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def parse_logs(text: str) -> List[LogLine]:
    """Parse raw log text into classified :class:`LogLine` entries."""
    lines: List[LogLine] = []
    for raw in split_lines(text):
        timestamp, message = parse_log_line(raw)
        lines.append(LogLine(timestamp=timestamp, message=message, level=classify_level(message)))
    return lines
