"""
docbundle CLI - Documentation bundling pipeline

A command-line tool for building one Markdown file per library by:
1. Cleaning non-Markdown artifacts out of docs/<library>/input
2. Transforming changed pages through an LLM (checksum-gated by io-lock.json)
3. Compiling each library's pages into public/docs/<library>.md
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from docbundle import __version__
from docbundle.cache import LockCache
from docbundle.config import PipelineConfig
from docbundle.hooks import TranscriptLogger
from docbundle.llm import ProgressSink, TextGenerator, build_provider
from docbundle.pipeline import (
    DocumentTransformer,
    DocumentationBuildPipeline,
    clean,
    collect_status,
    compile_docs,
)
from docbundle.schemas import CompileReport, TransformReport
from docbundle.utils import lock_key

app = typer.Typer(
    name="docbundle",
    help="Documentation bundling pipeline",
    add_completion=False,
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    root: Optional[Path] = typer.Option(
        None,
        "--root",
        help="Project root holding docs/, public/ and io-lock.json (default: current directory)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable debug logging"),
):
    """Build per-library Markdown bundles from raw documentation."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    try:
        ctx.obj = PipelineConfig.from_env(root)
    except Exception as e:
        _fail(e)


def build_generator(config: PipelineConfig) -> TextGenerator:
    """Text generator for the configured primary/secondary providers."""
    primary = build_provider(config.primary)
    secondary = build_provider(config.secondary) if config.secondary else None
    return TextGenerator(primary, secondary)


def _progress_sink(quiet: bool) -> Optional[ProgressSink]:
    if quiet:
        return None
    return lambda chunk: console.print(chunk, end="", markup=False, highlight=False, soft_wrap=True)


def _fail(e: BaseException) -> None:
    console.print(f"\n[red]❌ Error: {escape(str(e))}[/red]")
    raise typer.Exit(1)


@app.command("clean")
def clean_command(
    ctx: typer.Context,
    library: Optional[List[str]] = typer.Option(None, "--library", "-l", help="Only clean these libraries"),
):
    """
    Remove non-Markdown files from every library's input tree.

    Output trees are never touched.
    """
    config: PipelineConfig = ctx.obj

    try:
        report = clean(config.docs_path, library or None, root=config.root)
    except Exception as e:
        _fail(e)

    console.print(f"\n[bold green]✓ Clean complete[/bold green]")
    console.print(f"  • Libraries scanned: {len(report.libraries)}")
    console.print(f"  • Files removed: {len(report.removed)}")
    for path in report.removed:
        console.print(f"    - [cyan]{path}[/cyan]")
    if report.skipped_libraries:
        console.print(f"  • Without input tree: [yellow]{', '.join(report.skipped_libraries)}[/yellow]")


@app.command("transform")
def transform_command(
    ctx: typer.Context,
    library: Optional[List[str]] = typer.Option(None, "--library", "-l", help="Only transform these libraries"),
    force: bool = typer.Option(False, "--force", "-f", help="Ignore io-lock.json and reprocess every page"),
    delay: Optional[float] = typer.Option(None, "--delay", "-d", help="Seconds to pause after each transformed page"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Do not echo streamed output"),
    passthrough_plain: bool = typer.Option(
        False,
        "--passthrough-plain",
        help="Copy pages without HTML/JSX markup verbatim instead of calling the model",
    ),
    prompt_file: Optional[Path] = typer.Option(None, "--prompt-file", "-p", help="System prompt template"),
    transcript: Optional[Path] = typer.Option(None, "--transcript", help="Append a JSONL line per processed page"),
):
    """
    Rewrite changed input pages through the configured LLM.

    Pages whose checksum matches io-lock.json are skipped. When the primary
    provider rejects a page as too large, the secondary provider is tried once.

    Example:
        docbundle transform --library fastapi --delay 5
    """
    config: PipelineConfig = ctx.obj
    updates = {}
    if delay is not None:
        updates["delay_seconds"] = delay
    if passthrough_plain:
        updates["passthrough_plain"] = True
    if prompt_file is not None:
        updates["prompt_file"] = prompt_file
    if transcript is not None:
        updates["transcript_log"] = transcript
    config = config.model_copy(update=updates)

    secondary = f"{config.secondary.kind}/{config.secondary.model}" if config.secondary else "none"
    console.print(Panel.fit(
        "[bold cyan]docbundle transform[/bold cyan]\n\n"
        f"Docs: [yellow]{config.docs_path}[/yellow]\n"
        f"Lock file: [yellow]{config.lock_path}[/yellow]\n"
        f"Primary: [yellow]{config.primary.kind}/{config.primary.model}[/yellow]\n"
        f"Fallback: [yellow]{secondary}[/yellow]\n"
        f"Force: [yellow]{force}[/yellow]",
        border_style="cyan"
    ))

    try:
        transformer = DocumentTransformer(
            config=config,
            generator=build_generator(config),
            sink=_progress_sink(quiet),
            transcript=TranscriptLogger(config.transcript_path) if config.transcript_path else None,
        )
        report = asyncio.run(transformer.run(libraries=library or None, force=force))
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️  Transform interrupted by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        _fail(e)

    _print_transform_summary(report)


@app.command("compile")
def compile_command(
    ctx: typer.Context,
    library: Optional[List[str]] = typer.Option(None, "--library", "-l", help="Only compile these libraries"),
):
    """
    Concatenate each library's pages into public/docs/<library>.md.

    Pages come from output/, or from input/ when output/ is missing or empty,
    in descending path order.
    """
    config: PipelineConfig = ctx.obj

    try:
        report = compile_docs(config.docs_path, config.public_path, library or None, root=config.root)
    except Exception as e:
        _fail(e)

    _print_compile_summary(report)


@app.command("build")
def build_command(
    ctx: typer.Context,
    library: Optional[List[str]] = typer.Option(None, "--library", "-l", help="Only build these libraries"),
    force: bool = typer.Option(False, "--force", "-f", help="Ignore io-lock.json and reprocess every page"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Do not echo streamed output"),
):
    """Run clean, transform and compile in sequence."""
    config: PipelineConfig = ctx.obj

    try:
        pipeline = DocumentationBuildPipeline(
            config=config,
            generator=build_generator(config),
            sink=_progress_sink(quiet),
        )
        summary = asyncio.run(pipeline.run(force=force, libraries=library or None))
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️  Build interrupted by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        _fail(e)

    console.print("\n")
    console.print(Panel.fit(
        "[bold green]✨ Build Complete![/bold green]",
        border_style="green"
    ))
    console.print(f"  • Files removed: {len(summary.clean.removed)}")
    _print_transform_summary(summary.transform)
    _print_compile_summary(summary.compile)
    console.print(f"  • Duration: [cyan]{summary.duration_seconds:.1f}s[/cyan]")


@app.command("libraries")
def libraries_command(ctx: typer.Context):
    """Show every library with its input/output counts and compile state."""
    config: PipelineConfig = ctx.obj

    try:
        cache = LockCache(config.lock_path).load()
        statuses = collect_status(config, cache)
    except Exception as e:
        _fail(e)

    table = Table(title="Libraries")
    table.add_column("Library", style="cyan")
    table.add_column("Inputs (md/all)", justify="right")
    table.add_column("Outputs", justify="right")
    table.add_column("Up to date", justify="right")
    table.add_column("Compiled", justify="center")

    for status in statuses:
        table.add_row(
            status.library,
            f"{status.markdown_inputs}/{status.input_files}",
            str(status.output_files),
            f"{status.locked_files}/{status.markdown_inputs}",
            "✓" if status.compiled else "-",
        )

    console.print(table)


@app.command("invalidate")
def invalidate_command(
    ctx: typer.Context,
    library: Optional[str] = typer.Option(None, "--library", "-l", help="Drop every lock entry of this library"),
    path: Optional[Path] = typer.Option(None, "--path", help="Drop the lock entry of one input page"),
):
    """
    Remove lock entries so the next transform reprocesses those pages.
    """
    config: PipelineConfig = ctx.obj

    if not library and not path:
        console.print("[red]❌ Error: Must specify --library or --path[/red]")
        raise typer.Exit(1)

    try:
        cache = LockCache(config.lock_path).load()
        removed = 0
        if library:
            prefix = lock_key(config.docs_path / library / "input", config.root) + "/"
            removed += cache.remove_prefix(prefix)
        if path:
            page = path if path.is_absolute() else config.root / path
            removed += int(cache.remove(lock_key(page, config.root)))
        cache.save()
    except Exception as e:
        _fail(e)

    console.print(f"[bold green]✓ Removed {removed} lock entries[/bold green]")


@app.command()
def version():
    """Show the version of docbundle."""
    console.print(f"[bold cyan]docbundle[/bold cyan] v{__version__}")
    console.print("Documentation bundling pipeline")


def _print_transform_summary(report: TransformReport) -> None:
    console.print(f"\n[bold]📊 Transform[/bold]")
    console.print(f"  • Transformed: [green]{report.transformed}[/green]")
    console.print(f"  • Passed through: [cyan]{report.passthrough}[/cyan]")
    console.print(f"  • Unchanged: [cyan]{report.skipped}[/cyan]")
    if report.fallbacks:
        console.print(f"  • Fallbacks: [yellow]{report.fallbacks}[/yellow]")
    if report.skipped_libraries:
        console.print(f"  • Without input tree: [yellow]{', '.join(report.skipped_libraries)}[/yellow]")


def _print_compile_summary(report: CompileReport) -> None:
    console.print(f"\n[bold]📁 Compiled[/bold]")
    for entry in report.libraries:
        console.print(
            f"  • {entry.library}: {len(entry.files)} pages from {entry.source} → [cyan]{entry.target}[/cyan]"
        )


if __name__ == "__main__":
    app()
