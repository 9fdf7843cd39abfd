"""CLI command updating module versions"""

import sys
from typing import Optional

import click

from tfmodref.cli.debug import debug_option
from tfmodref.cli.utils.logging import logger
from tfmodref.cli.utils.search import collect_files, load_document, search_options
from tfmodref.git.cache import TagCache, TagResolver
from tfmodref.source.model import ModuleSource
from tfmodref.source.scan import find_module_sources, write_module_source
from tfmodref.versioning.exceptions import (
    ConstraintError,
    MalformedTagError,
    TransportError,
    VersionFormatError,
)
from tfmodref.versioning.policy import (
    SKIP_DOWNGRADE,
    SKIP_UNPINNED,
    Apply,
    NoOp,
    Skip,
    UpdateMode,
    UpdatePolicy,
    apply,
    decide,
    needs_remote_tags,
)


def _describe_skip(module: ModuleSource, decision: Skip) -> str:
    if decision.reason == SKIP_UNPINNED:
        return f"{decision.reason}, to pin it re-run with --version-unversioned"
    if decision.reason == SKIP_DOWNGRADE:
        return (
            f"{decision.reason}: target version {decision.target} is less than "
            f"current version {module.local_version_string()}, "
            "to allow it re-run with --allow-downgrades"
        )
    return decision.reason


@click.command(name="update")
@debug_option
@search_options
@click.option(
    "--latest",
    is_flag=True,
    default=False,
    help="Update to the latest available version.",
)
@click.option(
    "--constraint",
    "-c",
    default=None,
    help="Semver constraint to control the upgrade path, e.g. '>= 1.x < 3.0.1'.",
)
@click.option(
    "--version",
    "-v",
    "version",
    default=None,
    help="Update to the specified version; it is not checked against the remote tags.",
)
@click.option(
    "--version-unversioned",
    is_flag=True,
    default=False,
    help="Also pin sources that are tracking HEAD.",
)
@click.option(
    "--allow-downgrades",
    is_flag=True,
    default=False,
    help="Allow downgrades if the current version is greater than the target.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Output what would change, without making any changes.",
)
def update(
    path: str,
    extensions,
    latest: bool,
    constraint: Optional[str],
    version: Optional[str],
    version_unversioned: bool,
    allow_downgrades: bool,
    dry_run: bool,
):
    """Update the versions of the modules found in a file or folder tree.

    The target version is either the version given with --version, the
    latest tag of each module's repository (--latest), or the latest tag
    satisfying --constraint. An explicit version is written as given, without
    checking that the tag exists.

    Example:

      tfmodref update --path live/ --constraint '~> 2.1' --dry-run
    """
    if not (latest or constraint or version):
        raise click.UsageError(
            "One of --latest, --constraint or --version is required."
        )

    try:
        policy = UpdatePolicy.from_options(
            version=version,
            constraint=constraint,
            allow_downgrade=allow_downgrades,
            include_unpinned=version_unversioned,
        )
    except (VersionFormatError, ConstraintError) as e:
        logger.error(str(e))
        sys.exit(1)

    logger.debug(f"Update mode: {policy.mode.value}")
    if policy.mode is UpdateMode.EXPLICIT and policy.constraint is not None:
        logger.debug(f"Ignoring constraint '{policy.constraint}' for explicit version")

    resolver = TagResolver(TagCache())
    failed = False

    for file_path in collect_files(path, extensions):
        document = load_document(file_path)
        if document is None:
            failed = True
            continue

        for module in find_module_sources(document):
            if needs_remote_tags(module, policy):
                try:
                    module.update_remote_tags(resolver)
                except (TransportError, MalformedTagError) as e:
                    logger.error(
                        f"could not get remote tags for module {module.name} ({e})"
                    )
                    failed = True
                    continue

            decision = decide(module, policy)
            if isinstance(decision, Skip):
                logger.info(
                    f"skipping: {module.name} ({_describe_skip(module, decision)})"
                )
                continue
            if isinstance(decision, NoOp):
                logger.debug(
                    f"up to date: {module.name} ({module.local_version_string()})"
                )
                continue

            assert isinstance(decision, Apply)
            current = module.local_version_string()
            if dry_run:
                logger.info(
                    f"would update: {module.name} (from: {current}, to: {decision.target})"
                )
                continue

            logger.info(
                f"updating: {module.name} (from: {current}, to: {decision.target})"
            )
            apply(module, decision)
            write_module_source(document, module)

        if dry_run:
            continue
        try:
            document.save()
        except OSError as e:
            logger.error(f"error saving file at {file_path} ({e})")
            failed = True

    if failed:
        sys.exit(1)
