from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import Any, Iterator, Optional


LINE_MARKER_PREFIX = "#line"


def line_marker(line: int) -> str:
    """Line-reset sentinel: the next output line is `line` (0-based) of the includer."""
    return f"{LINE_MARKER_PREFIX} {line}"


@dataclass(frozen=True)
class Directive:
    name: str
    line: int
    start: int  # offset of the '#'
    end: int  # after the closing delimiter and trailing inline whitespace
    line_end: int  # offset of the '\n' ending the line, or len(text)


@dataclass(frozen=True)
class SourceLocation:
    file: Optional[str]  # None for the top-level input
    line: int


@dataclass(frozen=True)
class SourceMap:
    """One entry per literal output line, in output order. Marker lines have no entry."""

    entries: tuple[SourceLocation, ...] = ()

    @classmethod
    def identity(cls, text: str) -> "SourceMap":
        return cls(tuple(SourceLocation(None, i) for i in range(len(text.split("\n")))))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[SourceLocation]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> SourceLocation:
        return self.entries[index]

    def lookup(self, index: int) -> Optional[SourceLocation]:
        if 0 <= index < len(self.entries):
            return self.entries[index]
        return None

    def to_list(self) -> list[dict[str, Any]]:
        return [{"file": e.file, "line": e.line} for e in self.entries]


@dataclass(frozen=True)
class ExpandResult:
    text: str
    source_map: SourceMap
    marker_lines: tuple[int, ...] = ()  # output line indices holding line markers, ascending

    def origin_of(self, output_line: int) -> Optional[SourceLocation]:
        """Origin of a 0-based output line; None for marker lines and out-of-range lines."""
        if output_line < 0 or output_line in self.marker_lines:
            return None
        return self.source_map.lookup(output_line - bisect.bisect_left(self.marker_lines, output_line))
