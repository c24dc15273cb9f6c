"""Command-line interface for bibmerge.

Provides CLI commands to check, format, merge and search BibTeX collections.
"""

import importlib.metadata
import sys
from pathlib import Path
from typing import NoReturn

import click

from bibmerge.errors import BibmergeError

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("bibmerge")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"  # Fallback for development


def _fail(message: str) -> NoReturn:
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(1)


def _warn(message: str) -> None:
    click.secho(f"Warning: {message}", fg="yellow", err=True)


@click.group()
@click.version_option(version=__version__, prog_name="bibmerge")
def cli() -> None:
    """Consolidate bibliographic records from BibTeX files and DBLP.

    Use 'bibmerge COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="List required, optional and extra fields of every entry",
)
def check(input_path: str, verbose: bool) -> None:
    """Validate the entries of a BibTeX file.

    Prints one line per entry; '!' marks entries missing required fields.
    Exits with status 1 when the file has malformed entries.

    Examples
    --------
        bibmerge check references.bib
        bibmerge check references.bib --verbose
    """
    from bibmerge.parse import parse_bibtex_file

    try:
        records, warnings, errors = parse_bibtex_file(input_path)
    except (BibmergeError, OSError) as e:
        _fail(str(e))

    for message in warnings:
        _warn(message)
    for message in errors:
        click.secho(f"Error: {message}", fg="red", err=True)

    invalid = 0
    for record in records:
        missing = record.missing_fields()
        marker = "!" if missing else " "
        click.echo(f"{marker} {record.effective_key()}: {record.inline_string()}")
        if missing:
            invalid += 1
            click.echo(f"    missing: {', '.join(str(req) for req in missing)}")
        if verbose:
            for line in record.display_lines():
                click.echo(line)
            click.echo()

    click.echo(f"{len(records)} entries, {invalid} incomplete, {len(errors)} malformed")
    if errors:
        sys.exit(1)


@cli.command("format")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output BibTeX file (default: standard output)",
)
def format_command(input_path: str, output: str | None) -> None:
    """Rewrite a BibTeX file in canonical layout, generating missing keys.

    Examples
    --------
        bibmerge format references.bib
        bibmerge format references.bib -o clean.bib
    """
    from bibmerge.consolidate import assign_keys
    from bibmerge.parse import parse_bibtex_file
    from bibmerge.render import format_collection, write_bib_file

    try:
        parsed = parse_bibtex_file(input_path)
        for message in parsed.errors:
            _warn(f"skipped: {message}")
        records = assign_keys(parsed.records)
        if output is None:
            click.echo(format_collection(records))
        else:
            write_bib_file(records, Path(output))
            click.secho(f"✓ Wrote {len(records)} entries to {output}", fg="green")
    except (BibmergeError, OSError) as e:
        _fail(str(e))


@cli.command()
@click.argument(
    "input_paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False),
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    required=True,
    help="Output BibTeX file",
)
def merge(input_paths: tuple[str, ...], output: str) -> None:
    """Merge BibTeX files into one deduplicated file.

    Earlier files take priority: when two files hold the same work, the
    entry of the earlier file is kept.

    Examples
    --------
        bibmerge merge mine.bib theirs.bib -o merged.bib
    """
    from bibmerge.api import merge_files

    try:
        merged = merge_files(input_paths, output, on_error=_warn)
    except (BibmergeError, OSError) as e:
        _fail(str(e))

    click.secho(
        f"✓ Merged {len(input_paths)} files into {len(merged)} entries in {output}",
        fg="green",
    )


@cli.command()
@click.argument("terms", nargs=-1, required=True)
@click.option(
    "--managed",
    type=click.Path(dir_okay=False),
    default=None,
    help="Managed BibTeX file; its entries are marked 'm' in results",
)
@click.option(
    "--local",
    "local_paths",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help="BibTeX file to search (repeatable)",
)
@click.option("--no-remote", is_flag=True, help="Do not query DBLP")
@click.option(
    "--timeout",
    type=float,
    default=3.0,
    help="Network timeout in seconds (default: 3.0)",
)
@click.option(
    "--log",
    "log_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Append JSONL audit events to this file",
)
@click.option(
    "--import-into",
    type=click.Path(dir_okay=False),
    default=None,
    help="Add the picked results to this BibTeX file",
)
@click.option(
    "--pick",
    default=None,
    help="Results to import: '*', 'i' or 'i-j'",
)
@click.option(
    "--show",
    "show_selection",
    default=None,
    help="Print the BibTeX entries of these results: '*', 'i' or 'i-j'",
)
def search(
    terms: tuple[str, ...],
    managed: str | None,
    local_paths: tuple[str, ...],
    no_remote: bool,
    timeout: float,
    log_path: str | None,
    import_into: str | None,
    pick: str | None,
    show_selection: str | None,
) -> None:
    """Search BibTeX files and DBLP for TERMS and list consolidated results.

    Results are shown as '[i mX] authors, "title", venue, year' where 'm'
    marks entries of the managed file and '!' entries missing required
    fields.

    Examples
    --------
        bibmerge search types proofs programs
        bibmerge search coq --local refs.bib --no-remote
        bibmerge search types proofs --show 0
        bibmerge search coq --managed mine.bib --import-into mine.bib --pick 0-2
    """
    from bibmerge.api import search as run_consolidated_search
    from bibmerge.audit import AuditLogger, generate_run_id
    from bibmerge.collection import BibCollection
    from bibmerge.consolidate import ResultStore
    from bibmerge.engine import SearchConfig

    if (import_into is None) != (pick is None):
        _fail("--import-into and --pick must be given together")

    logger = None
    try:
        config = SearchConfig(timeout_seconds=timeout, log_path=log_path)
        if config.log_path is not None:
            logger = AuditLogger(run_id=generate_run_id(), log_path=config.log_path)

        sinks = [_warn] if logger is None else [_warn, logger.sink()]

        def warn(message: str) -> None:
            for sink in sinks:
                sink(message)

        outcome = run_consolidated_search(
            terms,
            managed=managed,
            local=local_paths,
            remote=not no_remote,
            config=config,
            on_warning=warn,
            logger=logger,
        )
    except (BibmergeError, OSError, ValueError) as e:
        _fail(str(e))
    finally:
        if logger is not None:
            logger.close()

    for source in outcome.failed_sources:
        _warn(f"source '{source}' failed and was skipped")

    store = ResultStore(outcome.results)
    for line in store.summary_lines():
        click.echo(line)

    if show_selection is not None:
        blocks = store.show(show_selection)
        if blocks is None:
            _fail(f"Invalid selection: {show_selection}")
        for block in blocks:
            click.echo()
            click.echo(block)

    if import_into is None:
        return

    selected = store.select(pick)
    if selected is None:
        _fail(f"Invalid selection: {pick}")

    try:
        collection = BibCollection.load(import_into, _warn)
        added = sum(collection.add(result.record) for result in selected)
        collection.save()
    except (BibmergeError, OSError) as e:
        _fail(str(e))

    click.secho(f"✓ Imported {added} of {len(selected)} entries into {import_into}", fg="green")


if __name__ == "__main__":
    cli()
