from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from glsl_include.core.errors import ExpandError, GlslIncludeError, IncludeCycleError, RegistryLoadError
from glsl_include.core.io.load_registry import load_registry
from glsl_include.core.model import ExpandResult
from glsl_include.core.registry import Registry
from glsl_include.core.scan.scan_directives import scan_directives

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()


@app.callback()
def _callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
) -> None:
    """Expand #include directives in GLSL sources."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@app.command("expand")
def expand(
    path: str = typer.Argument(..., help="Top-level source file"),
    manifest: Optional[str] = typer.Option(None, "--manifest", help="YAML manifest of name -> path/content"),
    include_dir: Optional[list[str]] = typer.Option(
        None, "--include-dir", "-I", help="Directory of includable files (repeatable)"
    ),
    out: Optional[str] = typer.Option(None, "--out", help="Write expanded source here instead of stdout"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Expand a source file and write the result."""
    if format not in ("text", "json"):
        _print_errors(
            [
                GlslIncludeError(
                    code="E_EXPAND_UNKNOWN_FORMAT",
                    message=f"unknown format: {format} (choose one of: text, json)",
                )
            ]
        )
        raise typer.Exit(code=2)

    def _emit_json(ok: bool, *, exit_code: int, errors: list[GlslIncludeError], result: ExpandResult | None) -> None:
        payload = {
            "tool": "glsl-include",
            "command": "expand",
            "ok": ok,
            "error_count": len(errors),
            "errors": [_to_item(e) for e in errors],
            "text": result.text if result else None,
            "source_map": result.source_map.to_list() if result else None,
            "marker_lines": list(result.marker_lines) if result else None,
        }
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
        raise typer.Exit(code=exit_code)

    try:
        src, registry = _load_inputs(path, manifest, include_dir or [])
    except RegistryLoadError as e:
        if format == "json":
            _emit_json(False, exit_code=1, errors=[e], result=None)
        _print_errors([e])
        raise typer.Exit(code=1)

    try:
        result = registry.expand(src)
    except ExpandError as e:
        if format == "json":
            _emit_json(False, exit_code=2, errors=[e], result=None)
        _print_errors([e])
        raise typer.Exit(code=2)

    if format == "json":
        _emit_json(True, exit_code=0, errors=[], result=result)

    if out is None:
        typer.echo(result.text)
        return

    p = Path(out)
    if str(p.parent) not in (".", ""):
        p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(result.text, encoding="utf-8")
    typer.echo(f"OK: wrote expanded source to {out} ({len(result.source_map)} lines mapped)")


@app.command("map")
def map_cmd(
    path: str = typer.Argument(..., help="Top-level source file"),
    manifest: Optional[str] = typer.Option(None, "--manifest", help="YAML manifest of name -> path/content"),
    include_dir: Optional[list[str]] = typer.Option(
        None, "--include-dir", "-I", help="Directory of includable files (repeatable)"
    ),
) -> None:
    """Show where every line of the expanded output came from."""
    try:
        src, registry = _load_inputs(path, manifest, include_dir or [])
        result = registry.expand(src)
    except RegistryLoadError as e:
        _print_errors([e])
        raise typer.Exit(code=1)
    except ExpandError as e:
        _print_errors([e])
        raise typer.Exit(code=2)

    table = Table(title=f"source map: {path}")
    table.add_column("Out", justify="right")
    table.add_column("File")
    table.add_column("Line", justify="right")
    table.add_column("Text", overflow="fold")
    for i, text in enumerate(result.text.split("\n")):
        origin = result.origin_of(i)
        if origin is None:
            table.add_row(str(i + 1), "marker", "", Text(text), style="dim")
            continue
        table.add_row(str(i + 1), origin.file or Path(path).name, str(origin.line + 1), Text(text))
    console.print(table)


@app.command("scan")
def scan(
    path: str = typer.Argument(..., help="Source file to scan"),
) -> None:
    """List the include directives found in a single file (no expansion)."""
    try:
        src = _read_source(path)
    except RegistryLoadError as e:
        _print_errors([e])
        raise typer.Exit(code=1)

    count = 0
    for d in scan_directives(src):
        typer.echo(f"{path}:{d.line + 1}: {d.name}")
        count += 1
    typer.echo(f"{count} directive(s)")


def _load_inputs(path: str, manifest: str | None, include_dirs: list[str]) -> tuple[str, Registry]:
    src = _read_source(path)
    registry = load_registry(manifest, include_dirs)
    return src, registry


def _read_source(path: str) -> str:
    p = Path(path)
    if not p.is_file():
        raise RegistryLoadError(code="E_FILE_NOT_FOUND", message="file does not exist", file=str(p))
    try:
        return p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise RegistryLoadError(code="E_FILE_READ", message=str(e), file=str(p)) from e


def _to_item(e: GlslIncludeError) -> dict[str, Any]:
    item: dict[str, Any] = {
        "code": e.code,
        "message": e.message,
        "file": e.file,
        "line": e.line,
        "severity": "error",
        "source": "load" if isinstance(e, RegistryLoadError) else "expand",
    }
    if isinstance(e, ExpandError):
        item["target"] = e.target
    if isinstance(e, IncludeCycleError):
        item["include_stack"] = list(e.include_stack)
    return item


def _print_errors(errors: list[GlslIncludeError]) -> None:
    errors_sorted = sorted(errors, key=lambda e: (e.file or "", e.line or 0, e.code))
    for e in errors_sorted:
        typer.echo(str(e), err=True)


def main() -> None:
    app(prog_name="glsl-include")


cli = typer.main.get_command(app)

if __name__ == "__main__":
    main()
