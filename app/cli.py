from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import orjson
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from adapters.filesystem.json_utils import load_json_value
from app.config import AppSettings, load_settings
from app.wiring import (
    build_compiler,
    build_document_repository,
    build_normalizer,
    build_project_writer,
    build_store,
    store_from_document,
)
from domain.errors import StructuralError
from domain.services.resolve_breakpoint_styles import resolve_preview_styles
from domain.services.scene_graph_store import check_tree_integrity

app = typer.Typer(no_args_is_help=True)
console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _settings(ctx: typer.Context) -> AppSettings:
    settings = ctx.obj
    if isinstance(settings, AppSettings):
        return settings
    return load_settings()


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None, "--config", help="YAML settings file (defaults to CANVAS_CONFIG_PATH).",
    ),
    log_level: Optional[str] = typer.Option(None, help="Override the configured log level."),
) -> None:
    try:
        settings = load_settings(config)
    except (FileNotFoundError, ValidationError) as exc:
        console.print(f"[red]Invalid configuration:[/] {exc}")
        raise typer.Exit(code=1) from exc
    configure_logging((log_level or settings.compiler.log_level).upper())
    ctx.obj = settings


@app.command("new")
def new_document(
    ctx: typer.Context,
    document: Path = typer.Argument(..., help="Where to write the new document JSON."),
    name: str = typer.Option("Untitled", help="Project name."),
) -> None:
    settings = _settings(ctx)
    if document.exists():
        console.print(f"[red]Refusing to overwrite existing file:[/] {document}")
        raise typer.Exit(code=1)
    store = build_store(settings, project_name=name)
    build_document_repository(settings).save(store.to_document(), document)
    console.print(f"[green]Wrote[/] {document}")


@app.command("compile")
def compile_document(
    ctx: typer.Context,
    document: Path = typer.Argument(..., help="Design document JSON."),
    output_dir: Optional[Path] = typer.Option(
        None, help="Directory for the generated project (defaults to compiler.output_dir).",
    ),
    page: Optional[str] = typer.Option(None, help="Page id to compile (defaults to current)."),
    breakpoint: Optional[str] = typer.Option(None, help="Widest breakpoint to compile for."),
) -> None:
    settings = _settings(ctx)
    repository = build_document_repository(settings)
    try:
        store = store_from_document(settings, repository.load(document))
        project = build_compiler(settings).compile(store.snapshot(), page, breakpoint)
    except FileNotFoundError as exc:
        console.print(f"[red]File not found:[/] {document}")
        raise typer.Exit(code=1) from exc
    except (ValidationError, StructuralError, ValueError) as exc:
        console.print(f"[red]Compile failed:[/] {exc}")
        raise typer.Exit(code=1) from exc

    target_dir = output_dir or settings.compiler.output_dir
    for path in build_project_writer(settings).write(project.files, target_dir):
        console.print(f"[green]Wrote[/] {path}")
    for diagnostic in project.diagnostics:
        console.print(
            f"[yellow]{diagnostic.kind}[/] {diagnostic.element_id or '-'}: {diagnostic.message}"
        )


@app.command("ingest")
def ingest_payload(
    ctx: typer.Context,
    payload: Path = typer.Argument(..., help="Element descriptor list or design response JSON."),
    document: Optional[Path] = typer.Option(
        None, help="Document to add elements to (a new one is created when omitted).",
    ),
    output: Optional[Path] = typer.Option(
        None, help="Where to write the result (defaults to --document)."
    ),
    parent: Optional[str] = typer.Option(None, help="Parent element id (defaults to page root)."),
) -> None:
    settings = _settings(ctx)
    repository = build_document_repository(settings)
    target = output or document
    if target is None:
        console.print("[red]Pass --document or --output[/]")
        raise typer.Exit(code=1)
    try:
        data = load_json_value(payload)
        if document is not None and document.exists():
            store = store_from_document(settings, repository.load(document))
        else:
            store = build_store(settings)
        normalizer = build_normalizer(settings, store)
        if isinstance(data, list):
            result = normalizer.ingest(data, parent)
        elif isinstance(data, dict) and parent is None:
            result = normalizer.ingest_design_response(data)
        elif isinstance(data, dict):
            result = normalizer.ingest(data.get("elements") or [], parent)
        else:
            console.print("[red]Payload must be a JSON list or object[/]")
            raise typer.Exit(code=1)
    except FileNotFoundError as exc:
        console.print(f"[red]File not found:[/] {exc.filename}")
        raise typer.Exit(code=1) from exc
    except (orjson.JSONDecodeError, ValidationError, StructuralError, ValueError) as exc:
        console.print(f"[red]Ingestion failed:[/] {exc}")
        raise typer.Exit(code=1) from exc

    repository.save(store.to_document(), target)
    console.print(f"[green]Created[/] {len(result.element_ids)} elements in {target}")
    for skipped in result.skipped:
        console.print(f"[yellow]Skipped[/] {skipped.path}: {skipped.reason}")


@app.command("resolve")
def resolve_styles(
    ctx: typer.Context,
    document: Path = typer.Argument(..., help="Design document JSON."),
    element_id: str = typer.Argument(..., help="Element id to resolve."),
    breakpoint: Optional[str] = typer.Option(None, help="Breakpoint id (defaults to widest)."),
    variant: Optional[str] = typer.Option(None, help="Variant id to preview."),
) -> None:
    settings = _settings(ctx)
    try:
        store = store_from_document(settings, build_document_repository(settings).load(document))
        snapshot = store.snapshot()
        element = store.get_element(element_id)
    except FileNotFoundError as exc:
        console.print(f"[red]File not found:[/] {document}")
        raise typer.Exit(code=1) from exc
    except (ValidationError, StructuralError) as exc:
        console.print(f"[red]Resolve failed:[/] {exc}")
        raise typer.Exit(code=1) from exc
    styles = resolve_preview_styles(element, snapshot, breakpoint, variant)
    console.print_json(orjson.dumps(styles, option=orjson.OPT_SORT_KEYS).decode("utf-8"))


@app.command("validate")
def validate(
    ctx: typer.Context,
    input_path: Path = typer.Argument(..., help="Design document to validate."),
) -> None:
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)

    try:
        document = build_document_repository(_settings(ctx)).load(input_path)
    except Exception as exc:  # noqa: BLE001
        console.print(f"[red]Validation failed:[/] {exc}")
        raise typer.Exit(code=1) from exc
    problems = check_tree_integrity(document.elements)
    for page in document.pages.values():
        if page.root_element_id not in document.elements:
            problems.append(f"Page {page.id} root {page.root_element_id} is missing")
    if problems:
        for problem in problems:
            console.print(f"[red]{problem}[/]")
        raise typer.Exit(code=1)
    console.print(
        f"[green]Valid document:[/] {input_path} "
        f"({len(document.pages)} pages, {len(document.elements)} elements)"
    )


if __name__ == "__main__":
    app()
