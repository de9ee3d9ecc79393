"""
rulebase/trace.py - Inference Trace Sinks

Every chaining decision (conflict set contents, rule found true or
false, solution found or not) is written as one human-readable line to
an injected sink. Any object with a write(line) method will do.

Sinks:
- NullTraceSink: discards everything
- LoggingTraceSink: forwards lines to a logger
- ListTraceSink: keeps lines in memory
"""
from __future__ import annotations

import logging
from typing import List, Optional, Protocol, runtime_checkable


@runtime_checkable
class TraceSink(Protocol):
    """Append-only, line-oriented consumer of trace text."""

    def write(self, line: str) -> None:
        ...


class NullTraceSink:
    """Sink that discards all lines."""

    def write(self, line: str) -> None:
        pass


class LoggingTraceSink:
    """Sink that forwards each line to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO):
        self.logger = logger or logging.getLogger("rulebase.trace")
        self.level = level

    def write(self, line: str) -> None:
        self.logger.log(self.level, line)


class ListTraceSink:
    """Sink that collects lines, for transcripts and tests."""

    def __init__(self):
        self.lines: List[str] = []

    def write(self, line: str) -> None:
        self.lines.append(line)

    def clear(self) -> None:
        self.lines.clear()

    def contains(self, text: str) -> bool:
        """True if any line contains text."""
        return any(text in line for line in self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def __str__(self) -> str:
        return "\n".join(self.lines)
