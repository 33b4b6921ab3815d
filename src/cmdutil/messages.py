"""Usage, warning and failure messages for command-line programs.

Each :class:`Messenger` owns a :class:`~cmdutil.models.ProgramConfig`. The
module-level :func:`configure`, :func:`usage`, :func:`warn` and :func:`fail`
act on a shared default messenger, which is what most scripts want:

    from cmdutil import configure, usage, fail

    configure(
        progname="myprog",
        usage_message="Fetch or update the contents of a remote URL.",
        synopses=["fetch  [-v] URL", "upload [-v] URL FILENAME"],
    )
    if not args:
        usage("no URL specified")

``usage`` and ``fail`` never return. Code that needs to inspect what would be
printed can call :meth:`Messenger.usage_termination` or
:meth:`Messenger.fail_termination` instead and run the directive itself.
"""

import numbers
from typing import NoReturn

import click

from .errors import PreconditionError
from .models import ProgramConfig, Termination

USAGE_STATUS = 2
FAIL_STATUS = 1


def _exit_status(value) -> int | None:
    """Return ``value`` as an exit status if it is a whole number, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _resolve_message(args: tuple) -> str:
    if not args:
        raise PreconditionError("a message or exception is required")
    first = args[0]
    if isinstance(first, BaseException):
        return str(first)
    if len(args) == 1:
        return str(first)
    return str(first) % args[1:]


class Messenger:
    """Formats and emits messages for one program."""

    def __init__(self, config: ProgramConfig | None = None):
        self.config = config if config is not None else ProgramConfig()

    def configure(
        self,
        progname: str | None = None,
        usage_message: str | None = None,
        synopses: list[str] | tuple[str, ...] | None = None,
    ) -> None:
        """Update the program name and usage text.

        ``usage_message`` and ``synopses`` must be given together, and there
        must be at least one synopsis. Arguments left as ``None`` keep their
        current value.
        """
        if progname is not None and not isinstance(progname, str):
            raise PreconditionError("progname must be a string")
        if usage_message is not None and not isinstance(usage_message, str):
            raise PreconditionError("usage_message must be a string")
        if usage_message is not None and synopses is None:
            raise PreconditionError("cannot specify a usage message without synopses")
        if synopses is not None:
            if usage_message is None:
                raise PreconditionError("cannot specify synopses without a usage message")
            if isinstance(synopses, str) or not all(isinstance(s, str) for s in synopses):
                raise PreconditionError("synopses must be a sequence of strings")
            if len(synopses) == 0:
                raise PreconditionError("there must be at least one synopsis")

        if progname is not None:
            self.config.progname = progname
        if usage_message is not None:
            self.config.usage_message = usage_message
            self.config.synopses = list(synopses)

    def format_warning(self, *args) -> str:
        """Return ``"<progname>: <message>"`` for the given warn arguments.

        An exception contributes its message verbatim. Anything else is a
        printf-style template filled from the remaining arguments.
        """
        return f"{self.config.progname}: {_resolve_message(args)}"

    def usage_lines(self) -> list[str]:
        if not self.config.has_usage:
            raise PreconditionError("cannot call usage() without configuring a usage message and synopses")
        prefix = f"usage: {self.config.progname} "
        indent = " " * len(prefix)
        lines = [
            (prefix if i == 0 else indent) + synopsis
            for i, synopsis in enumerate(self.config.synopses)
        ]
        lines.append(self.config.usage_message)
        return lines

    def usage_termination(self, *args) -> Termination:
        lines = self.usage_lines()
        if args:
            lines.insert(0, self.format_warning(*args))
        return Termination(status=USAGE_STATUS, lines=tuple(lines))

    def fail_termination(self, *args) -> Termination:
        status = _exit_status(args[0]) if args else None
        if status is None:
            status = FAIL_STATUS
        else:
            args = args[1:]
        return Termination(status=status, lines=(self.format_warning(*args),))

    def warn(self, *args) -> None:
        """Print a warning line to stderr."""
        click.echo(self.format_warning(*args), err=True)

    def usage(self, *args) -> NoReturn:
        """Print the usage text (after an optional warning) and exit with status 2."""
        self.usage_termination(*args).execute()

    def fail(self, *args) -> NoReturn:
        """Print an error message and exit.

        A leading whole number (``3`` or ``3.0``) is taken as the exit
        status; the default is 1.
        """
        self.fail_termination(*args).execute()


default_messenger = Messenger()


def configure(
    progname: str | None = None,
    usage_message: str | None = None,
    synopses: list[str] | tuple[str, ...] | None = None,
) -> None:
    default_messenger.configure(progname=progname, usage_message=usage_message, synopses=synopses)


def progname() -> str:
    return default_messenger.config.progname


def warn(*args) -> None:
    default_messenger.warn(*args)


def usage(*args) -> NoReturn:
    default_messenger.usage(*args)


def fail(*args) -> NoReturn:
    default_messenger.fail(*args)
