"""Expand #include directives in GLSL sources against an in-memory registry."""

from glsl_include.core.errors import (
    ExpandError,
    GlslIncludeError,
    IncludeCycleError,
    IncludeNotFoundError,
    RegistryLoadError,
)
from glsl_include.core.expand.expand_source import expand_source
from glsl_include.core.model import Directive, ExpandResult, SourceLocation, SourceMap
from glsl_include.core.registry import Registry
from glsl_include.core.scan.scan_directives import scan_directives

__all__ = [
    "Directive",
    "ExpandError",
    "ExpandResult",
    "GlslIncludeError",
    "IncludeCycleError",
    "IncludeNotFoundError",
    "Registry",
    "RegistryLoadError",
    "SourceLocation",
    "SourceMap",
    "expand_source",
    "scan_directives",
]
