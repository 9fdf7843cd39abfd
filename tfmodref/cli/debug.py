import click

from .utils.logging import configure_logging

DEBUG_KEY = "debug"


def _set_debug(ctx: click.Context, param: click.Parameter, value: bool) -> bool:
    root_ctx = ctx.find_root()
    root_ctx.ensure_object(dict)

    # `tfmodref --debug update` keeps debug on although the subcommand's own
    # flag defaults to off
    enabled = bool(value) or root_ctx.obj.get(DEBUG_KEY, False)
    root_ctx.obj[DEBUG_KEY] = enabled

    configure_logging(enabled)
    return enabled


# Accepted on the group and on every command
debug_option = click.option(
    "--debug/--no-debug",
    is_eager=True,
    expose_value=False,
    callback=_set_debug,
    help="Enable debug output.",
)
