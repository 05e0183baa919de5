from __future__ import annotations

from typing import Iterator, Optional

from glsl_include.core.model import Directive


# Whitespace allowed inside a directive line. '\r' is included so CRLF endings
# end up in the trailing whitespace of a directive.
_INLINE_SPACE = " \t\f\v\r"
_DELIMITERS: dict[str, str] = {"<": ">", '"': '"'}


def scan_directives(text: str) -> Iterator[Directive]:
    """Yield include directives of `text` in encounter order.

    Grammar (one physical line, starting at the '#'):
      '#' [ws] ['pragma' ws+] 'include' ws+ ('<' name '>' | '"' name '"') [ws]

    Text before the '#' on its line does not matter, so several directives can
    share a line. `//` and `/* */` comments are skipped and never inspected. A
    `#` that does not start a match leaves the line untouched; scanning resumes
    right after it. The generator is lazy and cannot be restarted.
    """

    n = len(text)
    pos = 0
    line = 0

    while pos < n:
        ch = text[pos]
        if ch == "\n":
            pos += 1
            line += 1
        elif text.startswith("//", pos):
            nl = text.find("\n", pos)
            pos = n if nl < 0 else nl
        elif text.startswith("/*", pos):
            close = text.find("*/", pos + 2)
            stop = n if close < 0 else close + 2
            line += text.count("\n", pos, stop)
            pos = stop
        elif ch == "#":
            directive = _match_directive(text, pos, line)
            if directive is None:
                pos += 1
                continue
            yield directive
            pos = directive.end
        else:
            pos += 1


def _match_directive(text: str, hash_pos: int, line: int) -> Optional[Directive]:
    line_end = text.find("\n", hash_pos)
    if line_end < 0:
        line_end = len(text)

    i = _skip_space(text, hash_pos + 1, line_end)

    # 'pragma' only counts as a whole token.
    if text.startswith("pragma", i, line_end):
        after = _skip_space(text, i + len("pragma"), line_end)
        if after > i + len("pragma"):
            i = after

    if not text.startswith("include", i, line_end):
        return None
    i += len("include")
    after = _skip_space(text, i, line_end)
    if after == i:
        return None
    i = after

    if i >= line_end or text[i] not in _DELIMITERS:
        return None
    name_end = text.find(_DELIMITERS[text[i]], i + 1, line_end)
    if name_end <= i + 1:
        return None

    return Directive(
        name=text[i + 1 : name_end],
        line=line,
        start=hash_pos,
        end=_skip_space(text, name_end + 1, line_end),
        line_end=line_end,
    )


def _skip_space(text: str, pos: int, limit: int) -> int:
    while pos < limit and text[pos] in _INLINE_SPACE:
        pos += 1
    return pos
