from __future__ import annotations

from typing import Iterator, Mapping, Optional

from glsl_include.core.expand.expand_source import expand_source
from glsl_include.core.model import ExpandResult, SourceMap


class Registry:
    """Named sources that include directives resolve against.

    Registration is expected to finish before `expand`; each call works on a
    snapshot, so one registry can serve concurrent expansions.
    """

    def __init__(self, files: Optional[Mapping[str, str]] = None) -> None:
        self._files: dict[str, str] = dict(files or {})

    def register(self, name: str, content: str) -> "Registry":
        """Add or replace `name`. Returns self so calls can be chained."""
        if not isinstance(name, str) or not name:
            raise ValueError("registry names must be non-empty strings")
        if not isinstance(content, str):
            raise TypeError(f"content for '{name}' must be a string")
        self._files[name] = content
        return self

    # Same operation under the name the context API uses.
    include = register

    def get(self, name: str) -> Optional[str]:
        return self._files.get(name)

    def names(self) -> list[str]:
        return sorted(self._files)

    def __contains__(self, name: object) -> bool:
        return name in self._files

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def expand(self, src: str) -> ExpandResult:
        return expand_source(dict(self._files), src)

    def expand_to_string(self, src: str) -> tuple[str, SourceMap]:
        result = self.expand(src)
        return result.text, result.source_map
