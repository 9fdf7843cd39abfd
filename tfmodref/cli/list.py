"""CLI command listing module versions"""

import sys

import click

from tfmodref.cli.debug import debug_option
from tfmodref.cli.utils.logging import logger
from tfmodref.cli.utils.search import collect_files, load_document, search_options
from tfmodref.git.cache import TagCache, TagResolver
from tfmodref.source.scan import find_module_sources
from tfmodref.versioning.exceptions import MalformedTagError, TransportError


@click.command(name="list")
@debug_option
@search_options
@click.option(
    "--remote",
    "-r",
    is_flag=True,
    default=False,
    help="Obtain the latest remote version for any found modules.",
)
def list_modules(path: str, extensions, remote: bool):
    """List the versions of the modules found in a file or folder tree.

    By default lists the local version (in source) of each module. With
    --remote, the latest version tagged in each module's repository is listed
    as well.

    Example:

      tfmodref list --path infrastructure/ --remote
    """
    resolver = TagResolver(TagCache())
    failed = False

    for file_path in collect_files(path, extensions):
        document = load_document(file_path)
        if document is None:
            failed = True
            continue

        for module in find_module_sources(document):
            if not remote:
                logger.info(
                    f"module: {module.name} (local: {module.local_version_string()})"
                )
                continue

            try:
                tags = module.update_remote_tags(resolver)
            except (TransportError, MalformedTagError) as e:
                logger.error(f"could not get remote tags for module {module.name} ({e})")
                failed = True
                continue

            latest = module.latest_remote_version
            if latest is None:
                latest = "none"
            logger.info(
                f"module: {module.name} (local: {module.local_version_string()}, "
                f"remote: {latest}, total versions: {len(tags)})"
            )

    if failed:
        sys.exit(1)
