"""Main Click CLI entry point for the snippet command.

Entry point registered in pyproject.toml::

    [project.scripts]
    snippet = "snippet_manager.cli.main:cli"

Usage examples::

    snippet save -t retry-loop -f src/client.py -s 40 -e 58
    snippet save -t whole-conf -f setup.cfg --all
    snippet copy -t retry-loop
    snippet show -t retry-loop
    snippet list --json-output
    snippet delete -t retry-loop
"""

from __future__ import annotations

import json
import sys
from typing import NoReturn, Optional

import click
from pydantic import ValidationError

from snippet_manager import __version__
from snippet_manager.clipboard import copy_to_clipboard
from snippet_manager.config import SnippetConfig
from snippet_manager.errors import SnippetError
from snippet_manager.models.snippet import Snippet
from snippet_manager.options import SaveOptions
from snippet_manager.storage.store import SnippetFileStore

TAG_HELP = "Tag to identify the snippet"


@click.group()
@click.version_option(version=__version__, prog_name="snippet-manager")
@click.option(
    "--storage-path",
    type=click.Path(exists=False, file_okay=False),
    default=None,
    envvar="SNIPPET_STORAGE_PATH",
    help="Directory holding snippets.json. Defaults to ~/.snippets.",
)
@click.pass_context
def cli(ctx: click.Context, storage_path: Optional[str]) -> None:
    """Snippet manager -- save and retrieve commonly used code snippets."""
    ctx.ensure_object(dict)
    ctx.obj["storage_path"] = storage_path


@cli.command()
@click.option("-t", "--tag", default="", help=TAG_HELP)
@click.option("-f", "--filepath", "file_path", default="", help="File to save code from")
@click.option("-s", "--startline", "start_line", default=None, help="Line to start saving code")
@click.option(
    "-e",
    "--endline",
    "end_line",
    default=None,
    help="Line to end saving code. Defaults to the start line.",
)
@click.option(
    "-a",
    "--all",
    "whole_file",
    is_flag=True,
    default=False,
    help="Save the whole file instead of a line range.",
)
@click.pass_context
def save(
    ctx: click.Context,
    tag: str,
    file_path: str,
    start_line: Optional[str],
    end_line: Optional[str],
    whole_file: bool,
) -> None:
    """Save a new snippet from a file."""
    try:
        options = SaveOptions.from_raw(
            tag, file_path, start_line, end_line, whole_file=whole_file
        )
        code = options.extract()
        files = _open_store(ctx)
        files.insert(files.load(), options.tag, code)
    except SnippetError as exc:
        _fail(exc)

    click.echo(
        f"Snippet saved successfully with tag '{options.tag}' "
        f"({options.describe_range()} of {options.file_path})"
    )


@cli.command()
@click.option("-t", "--tag", default="", help=TAG_HELP)
@click.pass_context
def copy(ctx: click.Context, tag: str) -> None:
    """Copy an existing snippet to the clipboard."""
    if not tag:
        _fail("Tag is required")
    try:
        files = _open_store(ctx)
        snippet = files.get(files.load(), tag)
        copy_to_clipboard(snippet.code)
    except SnippetError as exc:
        _fail(exc)

    click.echo(f"Snippet with tag '{tag}' copied to clipboard.")


@cli.command()
@click.option("-t", "--tag", default="", help=TAG_HELP)
@click.pass_context
def show(ctx: click.Context, tag: str) -> None:
    """Print the code of a snippet to stdout."""
    if not tag:
        _fail("Tag is required")
    try:
        files = _open_store(ctx)
        snippet = files.get(files.load(), tag)
    except SnippetError as exc:
        _fail(exc)

    click.echo(snippet.code)


@cli.command(name="list")
@click.option(
    "--json-output",
    "output_json",
    is_flag=True,
    default=False,
    help="Output snippets as JSON instead of a table.",
)
@click.pass_context
def list_snippets(ctx: click.Context, output_json: bool) -> None:
    """List saved snippets in the order they were saved."""
    try:
        files = _open_store(ctx)
        snippets = files.list_all(files.load())
    except SnippetError as exc:
        _fail(exc)

    if output_json:
        click.echo(
            json.dumps([s.model_dump(mode="json") for s in snippets], indent=2)
        )
    else:
        _render_list_table(snippets)


@cli.command()
@click.option("-t", "--tag", default="", help=TAG_HELP)
@click.pass_context
def delete(ctx: click.Context, tag: str) -> None:
    """Delete a snippet."""
    if not tag:
        _fail("Tag is required")
    try:
        files = _open_store(ctx)
        files.delete_by_tag(files.load(), tag)
    except SnippetError as exc:
        _fail(exc)

    click.echo(f"Snippet with tag '{tag}' deleted.")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _open_store(ctx: click.Context) -> SnippetFileStore:
    """Resolve configuration and return a handle on the store file."""
    storage_path = ctx.obj.get("storage_path") if ctx.obj else None
    try:
        config = SnippetConfig.load(storage_path=storage_path)
    except ValidationError as exc:
        _fail(f"Invalid configuration: {exc.errors()[0]['msg']}")
    config.configure_logging()
    return SnippetFileStore(config.store_path)


def _render_list_table(snippets: list[Snippet]) -> None:
    """Render snippets as an aligned table: tag, saved date, line count."""
    if not snippets:
        click.secho("No snippets saved.", fg="yellow")
        return

    width = max(len("TAG"), max(len(s.tag) for s in snippets))
    click.secho(f"{'TAG':{width}s}  {'SAVED':16s}  LINES", bold=True)
    for snippet in snippets:
        saved = _format_timestamp(snippet)
        click.echo(f"{snippet.tag:{width}s}  {saved:16s}  {snippet.line_count()}")


def _format_timestamp(snippet: Snippet) -> str:
    """Format the creation time as ``YYYY-MM-DD HH:MM`` in local time."""
    return snippet.created_at.astimezone().strftime("%Y-%m-%d %H:%M")


def _fail(error: object) -> NoReturn:
    """Report *error* in red on stderr and exit with status 1."""
    click.secho(str(error), fg="red", err=True)
    sys.exit(1)


if __name__ == "__main__":
    cli()
