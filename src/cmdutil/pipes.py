"""Quiet exit when stdout is a closed pipe.

Commands whose output is often piped into ``head`` and friends can wrap their
main body so that the reader going away ends the program with status 0
instead of a traceback:

    @exit_on_epipe()
    def main():
        for record in records:
            print(record)

It is opt-in; without it a ``BrokenPipeError`` propagates as usual.
"""

import os
import select
import sys
from contextlib import contextmanager
from typing import NoReturn

EPIPE_STATUS = 0


def _silence_stdout() -> None:
    # Point fd 1 at /dev/null so the interpreter's final flush cannot fail again.
    try:
        fd = sys.stdout.fileno()
    except (AttributeError, OSError, ValueError):
        return
    devnull = os.open(os.devnull, os.O_WRONLY)
    try:
        os.dup2(devnull, fd)
    finally:
        os.close(devnull)


def _stdout_broken() -> bool:
    """True when nobody is reading sys.stdout any more."""
    try:
        sys.stdout.flush()
    except BrokenPipeError:
        return True
    try:
        fd = sys.stdout.fileno()
    except (AttributeError, OSError, ValueError):
        return False
    # A pipe whose read end is closed polls as an error condition.
    poller = select.poll()
    poller.register(fd, select.POLLOUT)
    return any(event & select.POLLERR for _, event in poller.poll(0))


def _exit_quietly() -> NoReturn:
    _silence_stdout()
    sys.exit(EPIPE_STATUS)


@contextmanager
def exit_on_epipe():
    """Exit with status 0 when stdout is a broken pipe.

    A ``BrokenPipeError`` from anything else (a socket, a subprocess pipe)
    propagates, as do all other errors.
    """
    try:
        yield
    except BrokenPipeError:
        if not _stdout_broken():
            raise
        _exit_quietly()
    try:
        sys.stdout.flush()
    except BrokenPipeError:
        _exit_quietly()
