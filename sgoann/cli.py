"""
sgoann command line tool

    sgoann check FILE...          validate annotation files
    sgoann dump FILE [--json]     print every symbol path and its signature
    sgoann lookup FILE PATH       print the signature for one symbol path
    sgoann tokens FILE            print the token stream (debugging aid)

xwest
"""

import json
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from . import __version__
from .lexer.errors import AnnotationError
from .lexer.tokenizer import Tokenizer
from .parser.parser import parse_file

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO):
    """Configure logging with a Rich handler on stderr."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _console() -> Console:
    # Resolved per call so output follows whatever sys.stdout currently is
    return Console(file=sys.stdout, highlight=False, soft_wrap=True)


def _load(path: str, strict: bool):
    try:
        return parse_file(path, strict=strict)
    except AnnotationError as e:
        _console().print(str(e), markup=False, end="")
        sys.exit(1)


@click.group()
@click.version_option(__version__, prog_name="sgoann")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """Parse and inspect .sgoann annotation files."""
    configure_logging(logging.DEBUG if verbose else logging.WARNING)


@main.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--strict", is_flag=True, help="Reject symbol paths annotated twice.")
def check(files, strict: bool):
    """Validate one or more annotation files."""
    console = _console()
    failed = 0

    for path in files:
        try:
            annotations = parse_file(path, strict=strict)
        except AnnotationError as e:
            failed += 1
            console.print(f"{path}: FAILED", markup=False)
            console.print(str(e), markup=False, end="")
            continue
        console.print(f"{path}: ok ({len(annotations)} annotations)", markup=False)

    if failed:
        logger.debug("%d of %d files failed", failed, len(files))
        sys.exit(1)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table.")
@click.option("--strict", is_flag=True, help="Reject symbol paths annotated twice.")
def dump(file: str, as_json: bool, strict: bool):
    """Print every symbol path and its signature."""
    annotations = _load(file, strict)

    if as_json:
        click.echo(json.dumps(dict(annotations), indent=2, sort_keys=True))
        return

    table = Table(title=file)
    table.add_column("Symbol path", no_wrap=True)
    table.add_column("Signature")
    for path in sorted(annotations):
        table.add_row(Text(path), Text(annotations[path]))
    _console().print(table)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.argument("path")
def lookup(file: str, path: str):
    """Print the signature annotated for an exact symbol path."""
    annotations = _load(file, strict=False)

    signature = annotations.lookup(path)
    if signature is None:
        click.echo(f"no annotation for {path!r}", err=True)
        sys.exit(1)
    click.echo(signature)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def tokens(file: str):
    """Print each token with its line, column and offsets."""
    with open(file, 'rb') as f:
        tokenizer = Tokenizer(f.read(), file)

    try:
        for token in tokenizer:
            click.echo(f"{token.line}:{token.column}\t{token.offset}\t"
                       f"{token.rune_offset}\t{token.lexeme!r}")
    except AnnotationError as e:
        _console().print(str(e), markup=False, end="")
        sys.exit(1)


if __name__ == "__main__":
    main()
