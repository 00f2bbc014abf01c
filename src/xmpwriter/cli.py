# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Click-based CLI for xmpwriter.

This module provides a command that builds an XMP packet from
command-line options and writes it to a side-car file, to stdout, or
into the packet region of an existing file.
"""

# Standard Library
import logging
import sys
from pathlib import Path

# Third Party
import click
from colorama import Fore, Style, init

# Local
from . import __version__, properties
from .exceptions import XmpWriterError
from .packet import DEFAULT_PADDING, XmpWriter
from .utils import setup_logging
from .values import DateTime

EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_FILE_NOT_FOUND = 2
EXIT_INVALID_INPUT = 3

PDFA_LEVELS = ["1a", "1b", "2a", "2b", "2u", "3a", "3b", "3u"]

logger = logging.getLogger(__name__)


def print_success(msg: str) -> None:
    """Prints a success message in green.

    Args:
        msg: The message to output.
    """
    click.echo(f"{Fore.GREEN}\u2713{Style.RESET_ALL} {msg}", err=True)


def print_error(msg: str) -> None:
    """Prints an error message in red.

    Args:
        msg: The error message to output.
    """
    click.echo(f"{Fore.RED}\u2717 Error:{Style.RESET_ALL} {msg}", err=True)


def _parse_date(value: str | None, option: str) -> DateTime | None:
    if value is None:
        return None
    try:
        return DateTime.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint=option) from e


def build_packet(
    *,
    title: str | None = None,
    title_lang: str | None = None,
    creators: tuple[str, ...] = (),
    subjects: tuple[str, ...] = (),
    description: str | None = None,
    creator_tool: str | None = None,
    producer: str | None = None,
    keywords: str | None = None,
    create_date: DateTime | None = None,
    modify_date: DateTime | None = None,
    pdfa: str | None = None,
) -> XmpWriter:
    """Fill a new XmpWriter from the CLI options that were given."""
    writer = XmpWriter()
    if pdfa:
        properties.pdfa_part(writer, int(pdfa[0]))
        properties.pdfa_conformance(writer, pdfa[1])
    if title is not None:
        properties.title(writer, [(title_lang, title)])
    if creators:
        properties.creator(writer, creators)
    if subjects:
        properties.subject(writer, subjects)
    if description is not None:
        properties.description(writer, [(None, description)])
    if create_date is not None:
        properties.create_date(writer, create_date)
    if modify_date is not None:
        properties.modify_date(writer, modify_date)
    if creator_tool is not None:
        properties.creator_tool(writer, creator_tool)
    if producer is not None:
        properties.producer(writer, producer)
    if keywords is not None:
        properties.keywords(writer, keywords)
    return writer


@click.command()
@click.argument("output", required=False, type=click.Path(dir_okay=False))
@click.option("-t", "--title", help="Document title (dc:title)")
@click.option(
    "--title-lang",
    default=None,
    help="Language of --title, e.g. en-US (default: untagged)",
)
@click.option("-c", "--creator", "creators", multiple=True, help="Author (repeatable)")
@click.option("-s", "--subject", "subjects", multiple=True, help="Keyword (repeatable)")
@click.option("-d", "--description", help="Description (dc:description)")
@click.option("--creator-tool", help="Creating application (xmp:CreatorTool)")
@click.option("--producer", help="PDF producer (pdf:Producer)")
@click.option("--keywords", help="PDF keywords as one string (pdf:Keywords)")
@click.option("--create-date", help="Creation date, e.g. 2024-01-15T12:00:00+01:00")
@click.option("--modify-date", help="Modification date, same format as --create-date")
@click.option("--pdfa", type=click.Choice(PDFA_LEVELS), help="PDF/A identification")
@click.option("--about", default="", help="Value of rdf:about (default: empty)")
@click.option(
    "--padding",
    type=click.IntRange(min=0),
    default=DEFAULT_PADDING,
    show_default=True,
    help="Bytes of whitespace padding in a fresh packet",
)
@click.option(
    "--existing",
    type=click.Path(exists=True, dir_okay=False),
    help="File whose XMP packet is replaced in place",
)
@click.option("-f", "--force", is_flag=True, help="Overwrite existing files")
@click.option("-q", "--quiet", is_flag=True, help="Only output errors")
@click.option("--verbose", is_flag=True, help="Detailed output")
@click.version_option(version=__version__)
def main(
    output: str | None,
    title: str | None,
    title_lang: str | None,
    creators: tuple[str, ...],
    subjects: tuple[str, ...],
    description: str | None,
    creator_tool: str | None,
    producer: str | None,
    keywords: str | None,
    create_date: str | None,
    modify_date: str | None,
    pdfa: str | None,
    about: str,
    padding: int,
    existing: str | None,
    force: bool,
    quiet: bool,
    verbose: bool,
) -> None:
    """Writes an XMP metadata packet.

    OUTPUT is the file to write; without it the packet goes to stdout.
    """
    # Initialize colorama for Windows compatibility
    init()
    setup_logging(verbose=verbose, quiet=quiet)

    output_path = Path(output) if output else None
    if output_path is not None and output_path.exists() and not force:
        print_error(
            f"Output file already exists: {output_path}. Use --force to overwrite."
        )
        sys.exit(EXIT_GENERAL_ERROR)

    try:
        writer = build_packet(
            title=title,
            title_lang=title_lang,
            creators=creators,
            subjects=subjects,
            description=description,
            creator_tool=creator_tool,
            producer=producer,
            keywords=keywords,
            create_date=_parse_date(create_date, "--create-date"),
            modify_date=_parse_date(modify_date, "--modify-date"),
            pdfa=pdfa,
        )
        existing_bytes = Path(existing).read_bytes() if existing else None
        data = writer.finish(existing_bytes, about=about, padding=padding)

        if output_path is None:
            stdout = click.get_binary_stream("stdout")
            stdout.write(data)
            stdout.flush()
        else:
            output_path.write_bytes(data)
            if not quiet:
                print_success(f"Wrote {len(data)} bytes to {output_path}")
        exit_code = EXIT_SUCCESS

    except click.BadParameter as e:
        print_error(e.format_message())
        exit_code = EXIT_INVALID_INPUT
    except XmpWriterError as e:
        print_error(str(e))
        exit_code = EXIT_INVALID_INPUT
    except FileNotFoundError as e:
        print_error(str(e))
        exit_code = EXIT_FILE_NOT_FOUND
    except OSError as e:
        print_error(f"Cannot write output: {e}")
        exit_code = EXIT_GENERAL_ERROR

    sys.exit(exit_code)
