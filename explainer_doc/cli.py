"""
Inspects and renders interactive explanation documents from the command line.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from .config import ConfigError, build_config
from .exceptions import DocumentError
from .filesystem import FileExportSink, get_max_file_size, normalize_filepath, read_document
from .indexer import iter_headings
from .models import Section
from .session import DocumentSession
from .toc import generate_toc_entries

__all__ = ["cli"]


class _EchoSink:
    def write(self, text: str) -> None:
        click.echo(text, nl=False)


def _open_session(filepath: str, **overrides: object) -> DocumentSession:
    try:
        path = normalize_filepath(filepath)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    try:
        config = build_config(path.parent, **overrides)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        text = read_document(path, max_file_size)
    except DocumentError as error:
        raise click.ClickException(str(error)) from error

    session = DocumentSession(config)
    session.load(text)
    return session


def _echo_outline(sections: list[Section], depth: int = 0) -> None:
    for section in sections:
        click.echo(f"{'  ' * depth}- {section.heading.text} (#{section.heading.id})")
        _echo_outline(section.children, depth + 1)


@click.group()
@click.version_option(package_name="explainer-doc")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose: bool = False):
    """
    Parse, navigate and render interactive explanation documents.

    Examples:
        explainer-doc sections explanation.md
        explainer-doc render explanation.md --reveal quiz
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--max-level", type=int, help="Deepest heading level to index")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def sections(filepath: str, max_level: int | None = None):
    """Show the section index and the heading outline of a document."""
    session = _open_session(filepath, index_max_level=max_level)

    for section in session.sections:
        heading_id = session.index.get(section.key)
        click.echo(f"{section.key}: {'#' + heading_id if heading_id else '(unresolved)'}")

    click.echo("")
    _echo_outline(session.outline)


@cli.command()
@click.option("--collapse", "collapse_ids", multiple=True, help="Heading id to collapse")
@click.option("--collapse-all", is_flag=True, help="Collapse every heading")
@click.option("--reveal", "reveal_keys", multiple=True, help="Section key to reveal")
@click.option("--marker", default="[+]", show_default=True, help="Suffix for collapsed headings")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, writable=True),
    help="Write the rendered document to a file instead of stdout",
)
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def render(
    filepath: str,
    collapse_ids: tuple[str, ...] = (),
    collapse_all: bool = False,
    reveal_keys: tuple[str, ...] = (),
    marker: str = "[+]",
    output: str | None = None,
):
    """
    Render a document with sections collapsed or revealed.

    Collapsing is applied first, then every `--reveal` key expands its
    section. Keys that match no heading are reported on stderr.

    Examples:
        explainer-doc render explanation.md --collapse-all --reveal quiz
    """
    session = _open_session(filepath)

    if collapse_all:
        session.collapse_state.collapse_all(heading.id for heading in iter_headings(session.tree))
    for heading_id in collapse_ids:
        session.toggle(heading_id)

    for key in reveal_keys:
        result = session.reveal_section(key)
        if not result.found:
            click.echo(f"No section found for '{key}'", err=True)

    sink = FileExportSink(Path(output)) if output else _EchoSink()
    try:
        session.export(sink, collapsed_marker=marker)
    except OSError as error:
        raise click.ClickException(f"Could not write {output}: {error}") from error


@cli.command()
@click.option("--min-level", type=int, help="Minimum heading level")
@click.option("--max-level", type=int, help="Maximum heading level")
@click.option("--list-style", type=click.Choice(["1.", "*", "-"]), default="1.", help="List style")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def toc(
    filepath: str,
    min_level: int | None = None,
    max_level: int | None = None,
    list_style: str = "1.",
):
    """Print a table of contents linking to the document's heading ids."""
    session = _open_session(filepath, toc_min_level=min_level, toc_max_level=max_level)
    click.echo("".join(generate_toc_entries(session.tree, session.config, list_style)), nl=False)


@cli.command()
@click.option(
    "--answer",
    "answers",
    multiple=True,
    metavar="QUESTION_ID=TEXT",
    help="Grade an answer for a question",
)
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def quiz(filepath: str, answers: tuple[str, ...] = ()):
    """List the quiz questions of a document, or grade answers to them."""
    session = _open_session(filepath)

    if not answers:
        for question in session.questions.values():
            click.echo(f"{question.id}: {question.prompt}")
            for option in question.options:
                click.echo(f"    {option}")
        return

    for raw_answer in answers:
        question_id, separator, submitted = raw_answer.partition("=")
        if not separator:
            raise click.BadParameter(f"Expected QUESTION_ID=TEXT, got '{raw_answer}'")
        result = session.submit_answer(question_id.strip(), submitted)
        click.echo(f"{question_id.strip()}: {'correct' if result.is_correct else 'incorrect'}")

    correct, attempted = session.quiz.score()
    click.echo(f"Score: {correct}/{attempted}")


if __name__ == "__main__":
    cli()
