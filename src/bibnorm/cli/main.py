"""Command-line interface for bibnorm.

Provides CLI commands for entry assembly and the text normalizers.
"""

import importlib.metadata
import sys
import time
from pathlib import Path

import click

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("bibnorm")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"  # Fallback for development


@click.group()
@click.version_option(version=__version__, prog_name="bibnorm")
def cli() -> None:
    """Resolve and normalize bibliographic entries.

    Use 'bibnorm COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    required=True,
    help="Output JSONL file path",
)
@click.option(
    "--lenient",
    is_flag=True,
    help="Drop fields with unresolvable macros instead of failing the entry",
)
@click.option(
    "--name-list",
    "name_lists",
    multiple=True,
    help="Extra field to parse as a name list (repeatable, e.g. --name-list editor)",
)
@click.option(
    "--no-month-macros",
    is_flag=True,
    help="Do not predefine the jan..dec month macros",
)
@click.option(
    "--log",
    "log_path",
    type=click.Path(),
    default=None,
    help="Write JSONL audit events to this file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def assemble(
    input_path: str,
    output: str,
    lenient: bool,
    name_lists: tuple[str, ...],
    no_month_macros: bool,
    log_path: str | None,
    verbose: bool,
) -> None:
    """Assemble every entry of a raw database and write JSONL.

    INPUT_PATH is a JSON document produced by the lexer, holding
    "strings" (macro definitions) and "entries".

    Examples
    --------
        bibnorm assemble library.json -o entries.jsonl
        bibnorm assemble library.json -o out.jsonl --lenient --name-list editor
    """
    from bibnorm import write_jsonl
    from bibnorm.api import assemble_file
    from bibnorm.audit import AuditLogger, generate_run_id
    from bibnorm.engine import AssemblyConfig

    config = AssemblyConfig.with_name_lists(*name_lists, strict=not lenient)
    audit_logger = AuditLogger(generate_run_id(), Path(log_path)) if log_path else None

    if verbose:
        click.echo(f"Processing: {input_path}", err=True)

    start = time.perf_counter()
    try:
        if audit_logger:
            audit_logger.run_started(command=sys.argv, parameters=config.to_dict())

        result = assemble_file(
            input_path,
            config=config,
            audit_logger=audit_logger,
            month_macros=not no_month_macros,
        )

        if verbose:
            for message in result.warnings:
                click.secho(f"Warning: {message}", fg="yellow", err=True)
        for message in result.errors:
            click.secho(f"Error: {message}", fg="red", err=True)

        count = write_jsonl(result.entries, output)

        status = "partial" if result.errors else "success"
        if audit_logger:
            audit_logger.run_finished(status, time.perf_counter() - start, entries_processed=count)

        click.secho(f"✓ Successfully wrote {count} entries to {output}", fg="green")

    except Exception as e:
        if audit_logger:
            audit_logger.error(type(e).__name__, str(e))
            audit_logger.run_finished("failed", time.perf_counter() - start)
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    finally:
        if audit_logger:
            audit_logger.close()


@cli.command()
@click.argument("text")
def purify(text: str) -> None:
    """Print the sort key of TEXT.

    Examples
    --------
        bibnorm purify 'Bib{\\TeX}'
    """
    from bibnorm.normalize import purify as purify_text

    click.echo(purify_text(text))


@cli.command("change-case")
@click.argument("text")
def change_case(text: str) -> None:
    """Print TEXT with title-style case folding.

    Examples
    --------
        bibnorm change-case 'The {NASA} Mission'
    """
    from bibnorm.normalize import change_case as change_case_text

    click.echo(change_case_text(text))


if __name__ == "__main__":
    cli()
