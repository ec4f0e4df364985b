"""Main CLI entry point for Sketchforge.

This module provides the Typer application that turns an architecture graph
document into a documentation bundle.

Usage:
    sketchforge export graph.json --out blueprint
    sketchforge export graph.json --with-model --provider openai
    sketchforge packages FastAPI --language python
    sketchforge inspect graph.json
"""

from __future__ import annotations

import asyncio
import signal
import uuid
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from sketchforge.artifacts import (
    ArtifactNameCollisionError,
    ArtifactNaming,
    ArtifactSet,
    find_name_collisions,
    slugify,
)
from sketchforge.config import DEFAULT_MODELS, SketchforgeConfig, load_config
from sketchforge.export import export_deterministic, export_with_model
from sketchforge.generation.cancellation import CancellationToken
from sketchforge.generation.client import Credentials
from sketchforge.generation.errors import ExportCancelled, ExportFailure
from sketchforge.graph.loader import GraphValidationError, load_graph
from sketchforge.graph.models import Graph, Node
from sketchforge.inference.context import build_context
from sketchforge.logging import set_correlation_id, setup_logging
from sketchforge.registry.resolver import Language, registry_url, resolve_packages

app = typer.Typer(
    name="sketchforge",
    help="Sketchforge: compile architecture graphs into AI-ready documentation bundles",
    no_args_is_help=True,
)

console = Console()


class AppContext:
    """Application context shared across CLI commands.

    Attributes:
        config: Loaded Sketchforge configuration
    """

    def __init__(self, config: SketchforgeConfig):
        self.config = config


_app_context: AppContext | None = None


def get_app_context() -> AppContext:
    """Get the shared application context.

    Raises:
        RuntimeError: If context has not been initialized
    """
    if _app_context is None:
        raise RuntimeError("Application context not initialized. Call initialize_context first.")
    return _app_context


def initialize_context(config: SketchforgeConfig) -> AppContext:
    """Initialize the global application context."""
    global _app_context
    _app_context = AppContext(config)
    return _app_context


def resolve_collisions(nodes: list[Node], naming: ArtifactNaming) -> ArtifactNaming:
    """Give every colliding component spec a node-id suffix.

    A suffixed slug can clash with another label (``API`` + ``b`` against
    ``API B``); such clashes are suffixed again with a round number until the
    names settle. Clashes between non-component files are left in place.

    Returns:
        A naming scheme whose spec names are unique wherever a node is involved
    """
    node_ids = {node.id for node in nodes}
    overrides = dict(naming.spec_name_overrides)
    resolved = naming
    for attempt in range(1, len(nodes) + 2):
        collisions = find_name_collisions(nodes, resolved)
        colliding = {owner for owners in collisions.values() for owner in owners} & node_ids
        if not colliding:
            break
        for node in nodes:
            if node.id in colliding:
                suffix = slugify(node.id, fallback="node")
                if attempt > 1:
                    suffix = f"{suffix}-{attempt}"
                overrides[node.id] = f"{slugify(node.label)}-{suffix}"
        resolved = naming.model_copy(update={"spec_name_overrides": overrides})
    return resolved


def _load_graph_or_exit(graph_file: Path, project_name: str | None) -> Graph:
    try:
        return load_graph(graph_file, project_name=project_name)
    except GraphValidationError as e:
        console.print(f"[red]Invalid graph:[/red] {escape(str(graph_file))}")
        for problem in e.problems:
            console.print(f"  - {escape(problem)}")
        raise typer.Exit(code=1)
    except FileNotFoundError as e:
        console.print(f"[red]Error reading graph file:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)


def write_bundle(bundle: ArtifactSet, out_dir: Path) -> list[Path]:
    """Write every artifact under out_dir, creating directories as needed."""
    written: list[Path] = []
    for artifact in bundle.artifacts:
        path = out_dir / artifact.name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(artifact.content, encoding="utf-8")
        written.append(path)
    return written


async def _model_export(
    graph: Graph,
    project_name: str,
    model_id: str,
    credentials: Credentials,
    naming: ArtifactNaming,
    config: SketchforgeConfig,
) -> ArtifactSet:
    token = CancellationToken()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, token.cancel, "interrupted")
    except (NotImplementedError, RuntimeError):
        pass

    def on_artifact(artifact) -> None:
        console.print(f"[green]generated[/green] {artifact.name}")

    try:
        return await export_with_model(
            graph.nodes,
            graph.edges,
            project_name,
            model_id,
            credentials,
            token,
            naming=naming,
            config=config.model,
            on_artifact=on_artifact,
        )
    finally:
        try:
            loop.remove_signal_handler(signal.SIGINT)
        except (NotImplementedError, RuntimeError):
            pass


@app.command()
def export(
    graph_file: Annotated[
        Path,
        typer.Argument(help="Graph document (JSON)", exists=True, dir_okay=False, readable=True),
    ],
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Project name (defaults to the graph's projectName)"),
    ] = None,
    out: Annotated[
        Optional[Path],
        typer.Option("--out", "-o", help="Output directory"),
    ] = None,
    with_model: Annotated[
        bool,
        typer.Option("--with-model/--deterministic", "-m", help="Generate through a text model"),
    ] = False,
    provider: Annotated[
        Optional[str],
        typer.Option("--provider", help="Model provider (anthropic, openai)"),
    ] = None,
    model_id: Annotated[
        Optional[str],
        typer.Option("--model-id", help="Model identifier (defaults to the provider default)"),
    ] = None,
    api_key: Annotated[
        Optional[str],
        typer.Option("--api-key", envvar="SKETCHFORGE_API_KEY", help="Provider API key", show_default=False),
    ] = None,
) -> None:
    """Compile a graph document into a documentation bundle."""
    ctx = get_app_context()
    graph = _load_graph_or_exit(graph_file, name)
    project_name = graph.project_name or graph_file.stem
    out_dir = out or Path(ctx.config.export.output_dir)

    naming = resolve_collisions(graph.nodes, ArtifactNaming.from_config(ctx.config.export))

    if with_model:
        provider_name = (provider or ctx.config.model.provider).lower()
        if provider_name not in DEFAULT_MODELS:
            console.print(f"[red]Unknown provider:[/red] {escape(provider_name)}")
            raise typer.Exit(code=1)
        if model_id is None:
            model_id = ctx.config.model.model_id or DEFAULT_MODELS[provider_name]
        credentials = Credentials(provider=provider_name, api_key=api_key or "")

        console.print(
            f"[bold cyan]Generating with {provider_name}[/bold cyan] [dim]({escape(model_id)})[/dim]"
        )
        try:
            bundle = asyncio.run(
                _model_export(graph, project_name, model_id, credentials, naming, ctx.config)
            )
        except ExportCancelled:
            console.print("[yellow]Export cancelled; nothing was written[/yellow]")
            raise typer.Exit(code=130)
        except (ExportFailure, ArtifactNameCollisionError) as e:
            console.print(f"[red]Export failed:[/red] {escape(str(e))}")
            raise typer.Exit(code=1)
    else:
        bundle = export_deterministic(graph.nodes, graph.edges, project_name, naming=naming)
        if bundle.has_collisions:
            console.print("[red]Export failed:[/red] artifact names still collide")
            for artifact_name, owners in bundle.collisions.items():
                console.print(f"  - {escape(artifact_name)} <- {escape(', '.join(owners))}")
            raise typer.Exit(code=1)

    written = write_bundle(bundle, out_dir)

    table = Table(title=f"{escape(project_name)}: {len(written)} files")
    table.add_column("File", style="cyan")
    table.add_column("Kind")
    table.add_column("Bytes", justify="right")
    for artifact, path in zip(bundle.artifacts, written):
        table.add_row(escape(str(path)), artifact.kind.value, str(len(artifact.content.encode("utf-8"))))
    console.print(table)


@app.command()
def packages(
    label: Annotated[str, typer.Argument(help="Technology label, e.g. 'FastAPI'")],
    language: Annotated[
        Optional[Language],
        typer.Option("--language", "-l", help="Implementation language for ambiguous labels"),
    ] = None,
) -> None:
    """Show the verified package coordinates for a technology label."""
    coordinates = resolve_packages(label, language)
    if not coordinates:
        console.print(
            f"[yellow]No verified package for[/yellow] {escape(label)}. "
            "Confirm the package name and version against its official registry."
        )
        raise typer.Exit(code=1)

    table = Table(title=f"Verified packages: {escape(label)}")
    table.add_column("Package", style="cyan")
    table.add_column("Version")
    table.add_column("Registry")
    table.add_column("Purpose")
    table.add_column("Verify at", style="dim")
    for pkg in coordinates:
        table.add_row(
            pkg.name,
            pkg.version_constraint,
            pkg.registry_kind.value,
            pkg.purpose,
            registry_url(pkg),
        )
    console.print(table)


@app.command()
def inspect(
    graph_file: Annotated[
        Path,
        typer.Argument(help="Graph document (JSON)", exists=True, dir_okay=False, readable=True),
    ],
) -> None:
    """Show the inferred build order and integration patterns of a graph."""
    graph = _load_graph_or_exit(graph_file, None)
    context = build_context(graph.nodes, graph.edges)

    phases = Table(title="Build order")
    phases.add_column("Phase", style="bold")
    phases.add_column("Components")
    for group in context.build_phases:
        members = ", ".join(escape(f"{node.label} [{node.id}]") for node in group.nodes)
        phases.add_row(group.title, members or "[dim]none[/dim]")
    console.print(phases)

    if not context.integration_rows:
        console.print(Panel("No integrations defined.", title="Integrations"))
        return

    rows = Table(title="Integrations")
    rows.add_column("From")
    rows.add_column("To")
    rows.add_column("Pattern", style="cyan")
    rows.add_column("Notes")
    for row in context.integration_rows:
        rows.add_row(
            escape(row.source.label), escape(row.target.label), row.pattern, escape(row.notes)
        )
    console.print(rows)


@app.callback()
def main_callback(
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file (TOML format)",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure global options and initialize application context."""
    try:
        config = load_config(config_path)
    except Exception as e:
        console.print(f"[red]Error loading configuration:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    if verbose:
        config.logging.level = "DEBUG"
    setup_logging(config.logging)
    set_correlation_id(uuid.uuid4().hex[:12])
    initialize_context(config)

    if verbose:
        console.print("[dim]Debug logging enabled[/dim]")


if __name__ == "__main__":
    app()
