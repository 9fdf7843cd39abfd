"""tfmodref CLI"""

import click

from tfmodref import __version__
from tfmodref.cli.list import list_modules
from tfmodref.cli.update import update

from .debug import debug_option


@click.group()
@click.version_option(__version__, prog_name="tfmodref")
@debug_option
@click.pass_context
def cli(ctx):
    """
    A utility for working with terraform/terragrunt semver tagged modules stored in git.

    Lists the module versions in use locally and available remotely, and
    upgrades or downgrades them, either within a semver constraint or to the
    latest available version.
    """
    ctx.ensure_object(dict)


cli.add_command(list_modules)
cli.add_command(update)

if __name__ == "__main__":
    cli(obj={})
