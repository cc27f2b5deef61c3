"""
tokensync command line.

Works on a document exported as JSON: extract it, export tokens, or
generate documentation into an in-memory scene and print its outline.
"""

from __future__ import annotations

import asyncio
import json
from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.tree import Tree

from . import __version__
from .config import find_config
from .context import SyncContext
from .errors import TokenSyncError
from .exporters import generate_css_variables, generate_dtcg_tokens
from .extract import Extractor
from .generate import DocumentationGenerator, style_groups, variable_groups
from .logging import setup_logging
from .messages import FullData, MemoryNotifier
from .render import OutlineRenderer
from .scene import MemoryNode, MemoryScene, NodeKind
from .source import load_document

app = typer.Typer(
    help="Extract design tokens and keep their documentation in sync",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


class ExportFormat(StrEnum):
    JSON = "json"
    DTCG = "dtcg"
    CSS = "css"


DocumentArg = Annotated[
    Path,
    typer.Argument(help="Document exported as JSON", exists=True, dir_okay=False),
]


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Configure logging from tokensync.toml before any command runs."""
    try:
        config = find_config()
    except TokenSyncError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=2) from e
    setup_logging("DEBUG" if verbose else config.logging.level, config.logging.log_dir)


def _load_extractor(document: Path) -> Extractor:
    try:
        return Extractor(load_document(document))
    except TokenSyncError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1) from e


def _write(text: str, output: Path | None) -> None:
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    console.print(f"[green]✓[/green] Wrote {output}")


@app.command()
def extract(
    document: DocumentArg,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write JSON here instead of stdout")
    ] = None,
) -> None:
    """Print every style and variable as the full-data JSON payload."""
    extractor = _load_extractor(document)
    payload = FullData(
        styles=extractor.extract_styles(),
        variables=extractor.extract_variables(),
    )
    _write(json.dumps(payload.to_wire(), indent=2, ensure_ascii=False), output)


@app.command()
def export(
    document: DocumentArg,
    fmt: Annotated[
        ExportFormat, typer.Option("--format", "-f", help="Output format")
    ] = ExportFormat.DTCG,
    mode: Annotated[
        str | None, typer.Option("--mode", "-m", help="Mode to export (default: first)")
    ] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o")] = None,
) -> None:
    """Export variables (and, for DTCG, styles) as design tokens."""
    extractor = _load_extractor(document)
    variables = extractor.extract_variables()
    if not variables.meta.available:
        err_console.print(f"[yellow]{variables.meta.reason}[/yellow]")

    match fmt:
        case ExportFormat.JSON:
            text = json.dumps(variables.to_wire(), indent=2, ensure_ascii=False)
        case ExportFormat.DTCG:
            tokens = generate_dtcg_tokens(variables, styles=extractor.extract_styles(), mode=mode)
            text = json.dumps(tokens, indent=2, ensure_ascii=False)
        case ExportFormat.CSS:
            text = generate_css_variables(variables, mode=mode)
    _write(text, output)


def _outline(node: MemoryNode, tree: Tree, depth: int) -> None:
    for child in node.children:
        if child.kind is NodeKind.TEXT:
            continue
        label = child.name
        if child.name.startswith("Row"):
            label = f"[cyan]{child.name}[/cyan]  [dim]{' · '.join(child.texts()[1:3])}[/dim]"
        branch = tree.add(label)
        if depth > 1:
            _outline(child, branch, depth - 1)


async def _generate(document: Path, variables: bool) -> tuple[MemoryScene, MemoryNotifier]:
    extractor = _load_extractor(document)
    scene = MemoryScene()
    notifier = MemoryNotifier()
    generator = DocumentationGenerator(SyncContext(), scene, OutlineRenderer(scene), notifier)

    if variables:
        snapshot = extractor.extract_variables()
        collections = snapshot.collections
        if not collections:
            err_console.print("[yellow]No variable collections in document[/yellow]")
        config = find_config()
        for collection in collections:
            await generator.generate_variable_docs(
                collection.modes,
                variable_groups(collection),
                collection.name or config.docs.collection_name,
            )
    else:
        await generator.generate_style_docs(style_groups(extractor.extract_styles()))
    return scene, notifier


@app.command()
def docs(
    document: DocumentArg,
    variables: Annotated[
        bool, typer.Option("--variables", help="Document variables instead of styles")
    ] = False,
    depth: Annotated[int, typer.Option("--depth", "-d", help="Outline depth")] = 3,
) -> None:
    """Generate documentation into an in-memory canvas and print its outline."""
    scene, notifier = asyncio.run(_generate(document, variables))

    tree = Tree(f"[bold]{scene.current_page.name}[/bold]")
    _outline(scene.current_page, tree, depth)
    console.print(tree)
    for toast in notifier.of_type("notify"):
        console.print(f"[green]✓[/green] {toast.text}")


@app.command()
def version() -> None:
    """Show the installed version."""
    typer.echo(f"tokensync {__version__}")


def main() -> None:
    app()
