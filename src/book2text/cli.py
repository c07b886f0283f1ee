"""Main CLI application."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.prompt import Confirm

from book2text.commands.convert import convert_ebook
from book2text.config import Settings
from book2text.core.formats import OutputFormat
from book2text.models.options import ConversionOptions

app = typer.Typer(
    name="book2text",
    help="Convert EPUB, MOBI and PDF books into JSON, Markdown or plain text.",
    add_completion=False,
)

console = Console()


@app.command()
def convert(
    input_path: Annotated[
        Path,
        typer.Argument(
            help="Input ebook file path (epub, mobi, pdf)",
            file_okay=True,
            dir_okay=False,
        ),
    ],
    output_format: Annotated[
        str,
        typer.Option(
            "--format",
            "-f",
            help="Output format: json, markdown/md or text/txt",
        ),
    ] = "markdown",
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Output directory or file path (default: ./converted/)",
        ),
    ] = None,
    clean: Annotated[
        bool,
        typer.Option(
            "--clean",
            "-c",
            help="Clean the default output directory before conversion",
        ),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip the confirmation prompt for --clean",
        ),
    ] = False,
    no_metadata: Annotated[
        bool,
        typer.Option("--no-metadata", help="Exclude metadata from the output"),
    ] = False,
    no_toc: Annotated[
        bool,
        typer.Option("--no-toc", help="Exclude table of contents from the output"),
    ] = False,
    heading_level: Annotated[
        int,
        typer.Option(
            "--heading-level",
            help="Base heading level for markdown output",
            min=1,
            max=6,
        ),
    ] = 1,
    css: Annotated[
        Optional[str],
        typer.Option("--css", help="Custom CSS to include in markdown output"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show detailed log output"),
    ] = False,
) -> None:
    """Convert an ebook to JSON, Markdown or plain text."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    if output_format.lower() not in OutputFormat.names():
        console.print(f"[red]Unsupported output format: {output_format}[/]")
        console.print(f"[dim]Supported formats: {', '.join(OutputFormat.names())}[/]")
        raise typer.Exit(1)

    if clean and not yes:
        confirmed = Confirm.ask(
            "Are you sure you want to clean the output directory? "
            "All files will be deleted.",
            console=console,
            default=False,
        )
        if not confirmed:
            console.print("[yellow]Operation cancelled by user.[/]")
            raise typer.Exit(0)

    try:
        settings = Settings.from_env()
    except ValueError as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)

    options = ConversionOptions(
        include_metadata=not no_metadata,
        include_toc=not no_toc,
        heading_level=heading_level,
        custom_css=css or "",
    )

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(f"Processing {input_path.name}...", total=100)

        def report(percent: float, message: str = "") -> None:
            progress.update(task, completed=percent, description=message or None)

        result = convert_ebook(
            input_path,
            output_format,
            output,
            options,
            clean_output=clean,
            progress=report,
            settings=settings,
        )

    if not result.success:
        console.print(f"[red]Conversion failed: {result.error}[/]")
        raise typer.Exit(1)

    summary_lines = [
        "[green]Conversion successful![/]",
        "",
        f"[dim]Input:[/] {result.input_file}",
        f"[dim]Output:[/] {result.output_file}",
        f"[dim]Format:[/] {result.output_format}",
    ]
    if result.warning:
        summary_lines.append("")
        summary_lines.append(f"[yellow]Warning: {result.warning}[/]")

    console.print(Panel("\n".join(summary_lines), title="Complete", border_style="green"))


if __name__ == "__main__":
    app()
