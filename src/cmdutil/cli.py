"""Demonstration commands for cmdutil."""

import os
import sys

import click

from . import messages
from .confirm import confirm_blocking
from .pipes import exit_on_epipe

DEMO_PROGNAME = "myprog"
DEMO_USAGE_MESSAGE = "Fetch or update the contents of a remote URL."
DEMO_SYNOPSES = [
    "fetch  [-v] URL",
    "upload [-v] URL FILENAME",
]
DEFAULT_CONFIRM_MESSAGE = "Are you sure that you want to confirm? (y/[n]) "


def _configure_demo() -> None:
    messages.configure(
        progname=DEMO_PROGNAME,
        usage_message=DEMO_USAGE_MESSAGE,
        synopses=DEMO_SYNOPSES,
    )


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

@click.group()
@click.version_option()
def main() -> None:
    """Try out the cmdutil helpers.

    \b
    Examples
    --------
        cmdutil-demo usage
        cmdutil-demo usage-warn
        cmdutil-demo fail /no/such/file
        cmdutil-demo confirm "Delete everything? (y/[n]) "
    """


@main.command("usage")
def usage_cmd() -> None:
    """Print the demo usage text and exit with status 2."""
    _configure_demo()
    messages.usage()


@main.command("usage-warn")
def usage_warn_cmd() -> None:
    """Print a warning, then the demo usage text, and exit with status 2."""
    _configure_demo()
    messages.usage(ValueError("no URL specified"))


@main.command("fail")
@click.argument("path", default="/nonexistent_file")
def fail_cmd(path: str) -> None:
    """Stat PATH and fail with the error if it does not exist."""
    messages.configure(progname=DEMO_PROGNAME)
    try:
        os.stat(path)
    except OSError as exc:
        messages.fail("something went wrong: %s", exc)
    click.echo(f"{path} exists")


@main.command("confirm")
@click.argument("message", default=DEFAULT_CONFIRM_MESSAGE)
def confirm_cmd(message: str) -> None:
    """Ask MESSAGE and exit 0 on yes, 1 otherwise."""
    with exit_on_epipe():
        result = confirm_blocking(message)
    colour = "green" if result else "red"
    click.echo(f"result: {click.style(str(result), fg=colour)}", err=True)
    sys.exit(0 if result else 1)


if __name__ == "__main__":
    main()
