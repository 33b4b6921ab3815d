"""Core data models for cmdutil."""

import os
import sys
from dataclasses import dataclass, field
from typing import NoReturn

import click


def _default_progname() -> str:
    return os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "python"


@dataclass
class ProgramConfig:
    """Per-program settings used to format usage, warning and failure text."""

    progname: str = field(default_factory=_default_progname)
    usage_message: str | None = None
    synopses: list[str] | None = None  # set together with usage_message

    @property
    def has_usage(self) -> bool:
        return self.usage_message is not None and self.synopses is not None


@dataclass(frozen=True)
class Termination:
    """Lines to print to stderr followed by a process exit."""

    status: int
    lines: tuple[str, ...] = ()

    def execute(self) -> NoReturn:
        for line in self.lines:
            click.echo(line, err=True)
        sys.exit(self.status)
