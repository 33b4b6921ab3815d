"""cmdutil: usage, warning, failure and confirmation helpers for command-line programs."""

from .confirm import confirm, confirm_blocking
from .errors import PreconditionError
from .messages import Messenger, configure, fail, progname, usage, warn
from .models import ProgramConfig, Termination
from .pipes import exit_on_epipe

__version__ = "1.0.0"
__all__ = [
    "Messenger",
    "PreconditionError",
    "ProgramConfig",
    "Termination",
    "configure",
    "confirm",
    "confirm_blocking",
    "exit_on_epipe",
    "fail",
    "progname",
    "usage",
    "warn",
]
