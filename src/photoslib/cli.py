from __future__ import annotations

import asyncio
from dataclasses import dataclass
import json
from pathlib import Path
from typing import Annotated, Any, Coroutine, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from photoslib.config import default_config_path, load_config, write_default_config
from photoslib.errors import PhotosLibraryError
from photoslib.service import PhotosService
from photoslib.util.logging import setup_logging, use_color

T = TypeVar("T")

app = typer.Typer(help="photoslib: read-only access to a photo library")


@dataclass(slots=True)
class AppState:
    service: PhotosService
    console: Console
    config_path: Path


def _state(ctx: typer.Context) -> AppState:
    st = ctx.obj
    if not isinstance(st, AppState):
        raise RuntimeError("app state not initialized")
    return st


def _run(st: AppState, coro: Coroutine[Any, Any, T]) -> T:
    try:
        return asyncio.run(coro)
    except PhotosLibraryError as exc:
        st.console.print(f"[red]error:[/red] {exc}")
        raise typer.Exit(1) from exc


def _emit_obj(console: Console, obj: dict, json_out: bool) -> None:
    if json_out:
        typer.echo(json.dumps(obj, indent=2))
        return
    for k, v in obj.items():
        console.print(f"[bold]{k}[/bold]: {v}")


def _emit_assets(console: Console, result: dict, json_out: bool, files_out: bool) -> None:
    rows = result.get("assets") or []
    if json_out:
        typer.echo(json.dumps(result, indent=2))
        return

    if files_out:
        for row in rows:
            extra = row.get("extra") or {}
            typer.echo(
                "\t".join(
                    [
                        str(row.get("pk", "")),
                        str(row.get("uuid", "")),
                        str(row.get("kind", "")),
                        str(row.get("rel_path", "")),
                        str(extra.get("original_filename") or ""),
                        str(row.get("created", "")),
                    ]
                )
            )
        return

    if not rows:
        console.print("[dim]no assets[/dim]")
    else:
        table = Table(title="visible assets")
        table.add_column("pk", justify="right")
        table.add_column("kind")
        table.add_column("path")
        table.add_column("size")
        table.add_column("created")
        with_extra = any(row.get("extra") for row in rows)
        if with_extra:
            table.add_column("original")
        for row in rows:
            cells = [
                str(row.get("pk", "")),
                str(row.get("kind", "")),
                str(row.get("rel_path", "")),
                f"{row.get('width')}x{row.get('height')}",
                str(row.get("created", "")),
            ]
            if with_extra:
                cells.append(str((row.get("extra") or {}).get("original_filename") or ""))
            table.add_row(*cells)
        console.print(table)

    for err in result.get("errors") or []:
        console.print(f"[yellow]warning[/yellow] pk={err.get('pk')} {err.get('message')}")
    if result.get("last_pk") is not None:
        console.print(f"[dim]last pk: {result['last_pk']} (resume with --after-pk)[/dim]")


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[Path | None, typer.Option("--config", help="Config YAML path")] = None,
    library: Annotated[Path | None, typer.Option("--library", "-l", help="Photo library root")] = None,
    skip_errors: Annotated[bool, typer.Option("--skip-errors", help="Skip rows that fail to map")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Verbose logging")] = False,
) -> None:
    setup_logging(verbose)
    cfg_path = config.expanduser() if config else default_config_path()
    overrides: dict[str, Any] = {}
    if library is not None:
        overrides["library_path"] = str(library)
    if skip_errors:
        overrides["stream"] = {"skip_errors": True}
    color_on = use_color()
    console = Console(color_system="auto" if color_on else None, force_terminal=color_on)
    try:
        cfg = load_config(cfg_path, overrides=overrides)
    except (ValueError, TypeError) as exc:
        console.print(f"[red]bad config {cfg_path}:[/red] {exc}")
        raise typer.Exit(1) from exc
    ctx.obj = AppState(
        service=PhotosService(cfg),
        console=console,
        config_path=cfg_path,
    )


@app.command("init-config")
def init_config(
    ctx: typer.Context,
    path: Annotated[Path | None, typer.Option("--path", help="Write config to this path")] = None,
) -> None:
    st = _state(ctx)
    written = write_default_config(path.expanduser() if path else st.config_path)
    st.console.print(f"[green]config:[/green] {written}")


@app.command("count")
def count_cmd(
    ctx: typer.Context,
    json_out: Annotated[bool, typer.Option("--json")] = False,
) -> None:
    st = _state(ctx)
    summary = _run(st, st.service.count_assets())
    if json_out:
        typer.echo(json.dumps(summary, indent=2))
        return
    st.console.print(f"count: {summary['visible']}")
    if not st.service.config.ui.show_summary:
        return
    table = Table(title="kinds")
    table.add_column("kind")
    table.add_column("count", justify="right")
    for row in summary["kinds"]:
        table.add_row(str(row["kind"]), str(row["count"]))
    st.console.print(table)
    if summary["failed"]:
        st.console.print(f"[yellow]skipped rows:[/yellow] {summary['failed']}")


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    after_pk: Annotated[int | None, typer.Option("--after-pk", help="Only assets with a larger pk")] = None,
    limit: Annotated[int | None, typer.Option("-n", "--limit", min=0)] = None,
    extra: Annotated[bool, typer.Option("--extra", help="Also load the original filename")] = False,
    json_out: Annotated[bool, typer.Option("--json")] = False,
    files_out: Annotated[bool, typer.Option("--files")] = False,
) -> None:
    st = _state(ctx)
    result = _run(st, st.service.list_assets(after_pk=after_pk, limit=limit, with_extra=extra))
    _emit_assets(st.console, result, json_out, files_out)


@app.command("extra")
def extra_cmd(
    ctx: typer.Context,
    pk: int,
    json_out: Annotated[bool, typer.Option("--json")] = False,
) -> None:
    st = _state(ctx)
    row = _run(st, st.service.asset_extra(pk))
    if row is None:
        st.console.print(f"[red]no visible asset with pk {pk}[/red]")
        raise typer.Exit(1)
    _emit_obj(st.console, row, json_out)


@app.command("status")
def status_cmd(
    ctx: typer.Context,
    json_out: Annotated[bool, typer.Option("--json")] = False,
) -> None:
    st = _state(ctx)
    _emit_obj(st.console, _run(st, st.service.status()), json_out)


if __name__ == "__main__":
    app()
