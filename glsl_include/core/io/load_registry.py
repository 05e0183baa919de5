from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Optional

import yaml

from glsl_include.core.errors import RegistryLoadError
from glsl_include.core.registry import Registry


logger = logging.getLogger(__name__)

SHADER_SUFFIXES: frozenset[str] = frozenset(
    {".glsl", ".vert", ".frag", ".geom", ".comp", ".tesc", ".tese", ".h", ".inc"}
)


def load_registry(
    manifest: Optional[str] = None,
    include_dirs: Iterable[str] = (),
    *,
    registry: Optional[Registry] = None,
) -> Registry:
    """Build a registry from include directories and an optional YAML manifest.

    Directories are registered in order, then the manifest; later sources
    replace names registered by earlier ones.
    """

    reg = registry if registry is not None else Registry()
    for d in include_dirs:
        for name, content in load_include_dir(d).items():
            reg.register(name, content)
    if manifest:
        for name, content in load_manifest(manifest).items():
            reg.register(name, content)
    logger.debug("registry holds %d file(s)", len(reg))
    return reg


def load_include_dir(path: str | Path) -> dict[str, str]:
    """Read every shader-like file under `path`, keyed by its POSIX path relative to it."""

    root = Path(path)
    if not root.is_dir():
        raise RegistryLoadError(
            code="E_INCLUDE_DIR_NOT_FOUND",
            message="include directory does not exist",
            file=str(root),
        )

    out: dict[str, str] = {}
    for p in sorted(root.rglob("*")):
        if not p.is_file() or p.suffix.lower() not in SHADER_SUFFIXES:
            continue
        out[p.relative_to(root).as_posix()] = _read_text(p)
    logger.debug("loaded %d file(s) from %s", len(out), root)
    return out


def load_manifest(path: str | Path) -> dict[str, str]:
    """Load a YAML manifest.

    Format (either under a top-level `files:` key or bare):
      <name>: <path relative to the manifest>
      <name>: {path: <path>}
      <name>: {content: <inline source>}

    Returns a mapping of name -> content.
    """

    p = Path(path)
    if not p.exists():
        raise RegistryLoadError(code="E_FILE_NOT_FOUND", message="file does not exist", file=str(p))

    raw_text = _read_text(p)
    try:
        data = yaml.safe_load(raw_text)
    except yaml.YAMLError as e:
        raise RegistryLoadError(code="E_YAML_PARSE", message=str(e), file=str(p)) from e

    if data is None:
        return {}
    if isinstance(data, dict) and "files" in data:
        data = data["files"]
    if not isinstance(data, dict):
        raise RegistryLoadError(
            code="E_INVALID_MANIFEST",
            message="manifest must be a mapping of name -> path or {path|content}",
            file=str(p),
        )

    out: dict[str, str] = {}
    for name, entry in data.items():
        if not isinstance(name, str) or not name.strip():
            raise RegistryLoadError(
                code="E_INVALID_MANIFEST",
                message="file names must be non-empty strings",
                file=str(p),
            )
        out[name.strip()] = _resolve_entry(name, entry, p)
    return out


def _resolve_entry(name: str, entry: Any, manifest: Path) -> str:
    if isinstance(entry, str):
        return _read_text(_relative_to(manifest, entry))

    if isinstance(entry, dict):
        content = entry.get("content")
        rel = entry.get("path")
        if isinstance(content, str) and rel is None:
            return content
        if isinstance(rel, str) and content is None:
            return _read_text(_relative_to(manifest, rel))

    raise RegistryLoadError(
        code="E_INVALID_MANIFEST",
        message=f"entry '{name}' must be a path string or a mapping with exactly one of path/content",
        file=str(manifest),
    )


def _relative_to(manifest: Path, rel: str) -> Path:
    target = Path(rel)
    return target if target.is_absolute() else manifest.parent / target


def _read_text(p: Path) -> str:
    if not p.exists():
        raise RegistryLoadError(code="E_FILE_NOT_FOUND", message="file does not exist", file=str(p))
    try:
        return p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise RegistryLoadError(code="E_FILE_READ", message=str(e), file=str(p)) from e
