import logging
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from logscrubber.core.config import (
    CLIFlags,
    ResolvedSettings,
    find_config,
    resolve_settings,
    validate_settings,
)
from logscrubber.core.constants import APP_NAME, DESCRIPTION, VERSION
from logscrubber.core.exceptions import (
    ConfigurationError,
    OperationCancelledError,
    ScrubberError,
)
from logscrubber.core.models import PipelineStats
from logscrubber.core.pipeline import FilePipeline
from logscrubber.core.processor import LineProcessor
from logscrubber.core.session import ScrubberSession
from logscrubber.utils.audit_writer import write_audit_file
from logscrubber.utils.files import resolve_output_path

# Load environment variables from .env file (LOG_SCRUBBER_CONFIG)
load_dotenv()

app = typer.Typer(help=DESCRIPTION)
console = Console()

_PACKAGE_LOGGER = "logscrubber"


def _configure_logging(verbose: bool) -> None:
    """Route package logs through rich; INFO when verbose, WARNING otherwise."""
    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)
    package_logger.addHandler(
        RichHandler(console=console, show_time=False, show_path=False, markup=False)
    )
    package_logger.setLevel(logging.INFO if verbose else logging.WARNING)


def _handle_errors(e: Exception) -> None:
    """Handle and display errors appropriately."""
    if isinstance(e, OperationCancelledError):
        console.print(f"[bold yellow]Cancelled:[/bold yellow] {e}")
    elif isinstance(e, ConfigurationError):
        console.print(f"[bold red]Error:[/bold red] {e}")
        console.print("[dim]Use --help to see available options.[/dim]")
    else:
        console.print(f"[bold red]Error:[/bold red] {e}")
    raise typer.Exit(1)


def _print_settings(settings: ResolvedSettings, session: ScrubberSession) -> None:
    console.print(f"Input file: {settings.input_path}")
    console.print(f"Output file: {settings.output_path}")
    console.print(f"Audit file: {settings.audit_path}")
    console.print(f"Scrubbing level: {settings.scrub_level} ({session.level_name})")
    console.print(f"Dry run: {str(settings.dry_run).lower()}")


def _print_summary(stats: PipelineStats, processor: LineProcessor, verbose: bool) -> None:
    """Print line counts, the JSON/plain-text split and any JSON parsing issues."""
    summary = f"Processed {stats.processed_lines} lines out of {stats.total_lines} total lines"
    if stats.empty_lines:
        summary += f" ({stats.empty_lines} empty lines skipped)"
    if stats.failed_lines:
        summary += f" ({stats.failed_lines} lines failed processing but were included)"
    console.print(summary)

    json_lines = processor.json_success_count
    plain_lines = processor.json_failure_count
    total = json_lines + plain_lines
    if total:
        console.print(f"JSON processed: {json_lines} lines ({json_lines / total * 100:.1f}%)")
        console.print(
            f"Plain text processed: {plain_lines} lines ({plain_lines / total * 100:.1f}%)"
        )

    if not plain_lines:
        return

    console.print("\n[bold]JSON Processing Issues:[/bold]")
    console.print(
        f"  {plain_lines} lines had JSON parsing issues and were processed as plain text"
    )
    failures = processor.json_failures
    if failures:
        numbers = ", ".join(str(f.line_number) for f in failures[:5])
        if plain_lines > 5:
            numbers += f" ... and {plain_lines - 5} more"
        console.print(f"  Lines with issues: {numbers}")

    if verbose and failures:
        console.print("  Sample failure details:")
        for failure in failures[:3]:
            console.print(f"    Line {failure.line_number}: {failure.sample_content}", markup=False)
            console.print(f"      Error: {failure.error}", markup=False)
        if len(failures) > 3:
            console.print(f"    ... and {len(failures) - 3} more failures")


def _run_pipeline(
    pipeline: FilePipeline,
    settings: ResolvedSettings,
    output_path: Optional[str],
) -> PipelineStats:
    if settings.verbose:
        return pipeline.process_file(
            settings.input_path, output_path, compress=settings.compress_output_file
        )

    with console.status("Processing...") as status:

        def _progress(lines: int) -> None:
            status.update(f"Processing... {lines} lines")

        return pipeline.process_file(
            settings.input_path,
            output_path,
            compress=settings.compress_output_file,
            on_progress=_progress,
        )


@app.command()
def scrub(
    input_file: str = typer.Option("", "--input", "-i", help="Input log file path"),
    output_file: str = typer.Option(
        "", "--output", "-o", help="Output file path (default: <input>_scrubbed.<ext>)"
    ),
    level: int = typer.Option(0, "--level", "-l", help="Scrubbing level (1, 2, or 3)"),
    config_file: str = typer.Option(
        "", "--config", "-c", help="Config file path (default: scrubber_config.json)"
    ),
    audit_file: str = typer.Option(
        "", "--audit", "-a", help="Audit file path (default: <input>_audit.csv)"
    ),
    audit_type: str = typer.Option("", "--audit-type", help="Audit file format: csv or json"),
    overwrite: str = typer.Option(
        "",
        "--overwrite",
        help="Action when files exist: prompt, overwrite, timestamp, cancel (default: prompt)",
    ),
    max_file_size: str = typer.Option(
        "", "--max-file-size", help="Maximum input file size: 150MB, 1GB, etc. (default: 150MB)"
    ),
    compress: bool = typer.Option(False, "--compress", "-z", help="Compress output file with gzip"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview changes without writing output"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Scrub identifying information from a log file."""
    _configure_logging(verbose)

    try:
        config, config_path = find_config(config_file)
        if config is not None:
            console.print(f"[dim]Config file found, using config file at {config_path}[/dim]")

        flags = CLIFlags(
            input_file=input_file,
            output_file=output_file,
            level=level,
            config_file=config_file,
            audit_file=audit_file,
            audit_type=audit_type,
            overwrite_action=overwrite,
            max_file_size=max_file_size,
            verbose=verbose,
            dry_run=dry_run,
            compress=compress,
        )
        settings = resolve_settings(flags, config)
        validate_settings(settings)
        _configure_logging(settings.verbose)

        session = ScrubberSession(
            settings.scrub_level,
            verbose=settings.verbose,
            alias_domains=settings.alias_domains,
        )
        _print_settings(settings, session)

        output_path = None
        audit_path = settings.audit_path
        if not settings.dry_run:
            output_path = resolve_output_path(settings.output_path, settings.overwrite_action)
            if output_path != settings.output_path:
                console.print(f"Output will be written to: {output_path}")
            audit_path = resolve_output_path(settings.audit_path, settings.overwrite_action)
            if audit_path != settings.audit_path:
                console.print(f"Audit file will be written to: {audit_path}")

        processor = LineProcessor(session)
        pipeline = FilePipeline(processor, verbose=settings.verbose)

        stats = _run_pipeline(pipeline, settings, output_path)
        if not settings.dry_run:
            write_audit_file(audit_path, session.audit_records(), settings.audit_file_type)

        _print_summary(stats, processor, settings.verbose)
        console.print(
            f"Audit entries: {len(session.ledger)} distinct values, "
            f"{session.ledger.total_replacements()} replacements"
        )

        if settings.dry_run:
            console.print("Dry run completed successfully. No files were modified.")
            return

        console.print(
            f"[green]Log scrubbing completed successfully.[/green] Output written to: {output_path}"
        )
        console.print(f"Audit log written to: {audit_path}")

    except ScrubberError as e:
        _handle_errors(e)


@app.command()
def version():
    """Show version and exit."""
    typer.echo(f"{APP_NAME} v{VERSION}")


# Add a callback to ensure we always have subcommands
@app.callback(invoke_without_command=True)
def main(ctx: typer.Context):
    if ctx.invoked_subcommand is None:
        console.print("🧽 [bold blue]Welcome to the log scrubber![/bold blue]")
        console.print("\n[dim]Use --help to see available commands.[/dim]")
        console.print("[dim]Available commands: scrub, version[/dim]")
        console.print("[dim]Example: scrub -i mattermost.log -l 2 --audit-type json[/dim]")


if __name__ == "__main__":
    app()
