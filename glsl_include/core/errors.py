from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class GlslIncludeError(Exception):
    """Base error envelope. Carries a stable code plus the location it refers to.

    `line` is 0-based; it is rendered 1-based the way compilers report lines.
    """

    code: str
    message: str
    file: Optional[str] = None
    line: Optional[int] = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code, self.message, self.file, self.line)

    def __reduce__(self):
        return (type(self), self.args)

    def __str__(self) -> str:
        loc = self.file if self.file else "<source>"
        if self.line is not None:
            loc = f"{loc}:{self.line + 1}"
        return f"{loc}: {self.code}: {self.message}"


class RegistryLoadError(GlslIncludeError):
    pass


class ExpandError(GlslIncludeError):
    """A directive could not be expanded. `file` is the includer (None for top-level)."""

    def __init__(
        self,
        code: str,
        message: str,
        file: Optional[str] = None,
        line: Optional[int] = None,
        target: str = "",
    ) -> None:
        super().__init__(code, message, file, line)
        self.target = target
        self.args = (*self.args, target)


class IncludeCycleError(ExpandError):
    def __init__(
        self,
        code: str,
        message: str,
        file: Optional[str] = None,
        line: Optional[int] = None,
        target: str = "",
        include_stack: Iterable[str] = (),
    ) -> None:
        super().__init__(code, message, file, line, target)
        self.include_stack: tuple[str, ...] = tuple(include_stack)
        self.args = (*self.args, self.include_stack)


class IncludeNotFoundError(ExpandError):
    pass
