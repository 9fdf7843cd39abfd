"""Options and helpers shared by the commands that walk configuration files"""

import sys
from functools import wraps
from pathlib import Path
from typing import List, Optional, Sequence

import click

from tfmodref.cli.utils.logging import logger
from tfmodref.config import get_exclude_dirs, get_extensions
from tfmodref.files import FileExtensions, find_terraform_files
from tfmodref.hcl.document import DocumentError, HclDocument


def search_options(func):
    """Add the --path and --extensions options to a command."""

    @click.option(
        "--path",
        "-p",
        default=".",
        show_default=True,
        type=click.Path(exists=True, file_okay=True, dir_okay=True),
        help="Path to search (recursively) for terraform files, either a file or a directory.",
    )
    @click.option(
        "--extensions",
        "-e",
        multiple=True,
        help="File extensions to search for references (repeatable or comma separated). "
        "Defaults to .hcl and .tf.",
    )
    @wraps(func)
    def wrapper(*args, **kwargs):
        return func(*args, **kwargs)

    return wrapper


def collect_files(path: str, extensions: Sequence[str]) -> List[Path]:
    """Find the files to process, exiting on an unreadable path."""
    file_extensions = FileExtensions(extensions or get_extensions())
    try:
        files = find_terraform_files(path, file_extensions, get_exclude_dirs())
    except OSError as e:
        logger.error(
            f"error walking path at {path} with extensions "
            f"[{file_extensions.as_comma_separated_string()}] ({e})"
        )
        sys.exit(1)

    logger.debug(
        f"Found {len(files)} file(s) under {path} with extensions "
        f"[{file_extensions.as_comma_separated_string()}]"
    )
    return files


def load_document(path: Path) -> Optional[HclDocument]:
    """Load a file, logging and returning None when it cannot be parsed."""
    try:
        return HclDocument.load(path)
    except DocumentError as e:
        logger.error(f"errors occurred whilst parsing file at {path}:\n{e}")
        return None
