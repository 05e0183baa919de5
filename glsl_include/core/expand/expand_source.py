from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Iterator, Mapping, Optional

from glsl_include.core.errors import IncludeCycleError, IncludeNotFoundError
from glsl_include.core.model import (
    Directive,
    ExpandResult,
    SourceLocation,
    SourceMap,
    line_marker,
)
from glsl_include.core.scan.scan_directives import scan_directives


logger = logging.getLogger(__name__)


def expand_source(files: Mapping[str, str], src: str) -> ExpandResult:
    """Expand include directives in `src` against `files`.

    Behaviors:

    - every registered name is expanded at most once per call; later directives
      naming it anywhere in the traversal are dropped (global include guard).
    - a directive naming a file that is still being expanded raises
      IncludeCycleError; an unregistered name raises IncludeNotFoundError.
      The first error aborts the call.
    - each spliced file is followed by a `#line N` marker line giving the
      0-based line of the includer's text that comes next.

    Descent uses an explicit frame stack instead of recursion. The include
    stack and processed set live only for this call.
    """

    directives = scan_directives(src)
    first = next(directives, None)
    if first is None:
        return ExpandResult(text=src, source_map=SourceMap.identity(src))

    emitter = _Emitter()
    include_stack: list[str] = []
    processed: set[str] = set()
    frames = [_Frame(name=None, text=src, directives=itertools.chain([first], directives))]

    while frames:
        frame = frames[-1]
        d = next(frame.directives, None)

        if d is None:
            emitter.literal(frame.text[frame.cursor :], frame.name, frame.line)
            frames.pop()
            if frame.name is not None:
                include_stack.pop()
                processed.add(frame.name)
                _resume_after_splice(frames[-1], emitter)
            continue

        if not d.name:
            raise RuntimeError(f"directive without a name at {frame.name or '<source>'}:{d.line}")

        emitter.literal(frame.text[frame.cursor : d.start], frame.name, frame.line)
        frame.cursor = d.start
        frame.line = d.line

        if d.name in processed:
            logger.debug("skipping already expanded %s (%s:%d)", d.name, frame.name or "<source>", d.line)
            emitter.open_line(frame.name, d.line)
            frame.cursor = d.end
            continue

        if d.name in include_stack:
            raise IncludeCycleError(
                code="E_INCLUDE_CYCLE",
                message=f'recursive include of "{d.name}", include stack {include_stack}',
                file=frame.name,
                line=d.line,
                target=d.name,
                include_stack=tuple(include_stack),
            )

        content = files.get(d.name)
        if content is None:
            raise IncludeNotFoundError(
                code="E_INCLUDE_NOT_FOUND",
                message=f'could not find "{d.name}"; register it before expanding',
                file=frame.name,
                line=d.line,
                target=d.name,
            )

        logger.debug(
            "expanding %s (%s:%d, depth %d)", d.name, frame.name or "<source>", d.line, len(include_stack) + 1
        )
        include_stack.append(d.name)
        frame.pending = d
        frames.append(_Frame(name=d.name, text=content, directives=scan_directives(content)))

    return emitter.result()


@dataclass
class _Frame:
    name: Optional[str]
    text: str
    directives: Iterator[Directive]
    cursor: int = 0
    line: int = 0
    pending: Optional[Directive] = None


def _resume_after_splice(frame: _Frame, emitter: "_Emitter") -> None:
    """Emit the line marker for the directive just spliced and move past it."""

    d = frame.pending
    if d is None:
        raise RuntimeError(f"no spliced directive to resume in {frame.name or '<source>'}")
    frame.pending = None

    if frame.text[d.end : d.line_end].strip():
        # Trailing text stays on the directive's line, below the marker.
        emitter.marker(d.line)
        frame.cursor = d.end
        frame.line = d.line
        return

    # The marker takes the place of the directive line's terminator.
    emitter.marker(d.line + 1)
    frame.cursor = min(d.line_end + 1, len(frame.text))
    frame.line = d.line + 1
    if d.line_end < len(frame.text) and frame.cursor == len(frame.text):
        # A final terminator still leaves an empty last line.
        emitter.open_line(frame.name, frame.line)


class _Emitter:
    """Collects output lines and their source-map entries.

    The last line stays open for continuation until a marker closes it; the
    open line is always a literal line, so it owns the last map entry.
    """

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._entries: list[SourceLocation] = []
        self._markers: list[int] = []
        self._open = False

    def literal(self, text: str, origin: Optional[str], line: int) -> None:
        if not text:
            return
        for offset, piece in enumerate(text.split("\n")):
            if offset == 0 and self._open:
                if piece.strip() and not self._lines[-1].strip():
                    self._entries[-1] = SourceLocation(origin, line)
                self._lines[-1] += piece
                continue
            self._lines.append(piece)
            self._entries.append(SourceLocation(origin, line + offset))
        self._open = True

    def open_line(self, origin: Optional[str], line: int) -> None:
        if not self._open:
            self._lines.append("")
            self._entries.append(SourceLocation(origin, line))
            self._open = True

    def marker(self, line: int) -> None:
        if self._open and not self._lines[-1].strip():
            self._lines[-1] = line_marker(line)
            self._entries.pop()
        else:
            self._lines.append(line_marker(line))
        self._markers.append(len(self._lines) - 1)
        self._open = False

    def result(self) -> ExpandResult:
        return ExpandResult(
            text="\n".join(self._lines),
            source_map=SourceMap(tuple(self._entries)),
            marker_lines=tuple(self._markers),
        )
