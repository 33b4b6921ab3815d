"""File-descriptor input sources for the confirmation prompt (POSIX only)."""

import asyncio
import os
import select
import stat
import termios
from typing import Callable, Protocol

from .errors import PreconditionError


class InputSource(Protocol):
    """What :func:`cmdutil.confirm.confirm` needs from its input."""

    @property
    def is_raw(self) -> bool: ...

    def isatty(self) -> bool: ...

    def set_raw_mode(self, enabled: bool) -> None: ...

    def read_byte(self) -> bytes | None: ...

    def wait_readable(self, callback: Callable[[], None]) -> None: ...

    def cancel_wait(self) -> None: ...


_RAW_IFLAG_OFF = termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON
_RAW_LFLAG_OFF = termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG

# tcgetattr() list indices
_IFLAG, _CFLAG, _LFLAG, _CC = 0, 2, 3, 6


class TerminalInput:
    """Single-byte reads and raw-mode control on a file descriptor.

    Raw mode here means no line buffering, no echo and no signal keys, so one
    keypress (including Ctrl-C) arrives as one byte. Output post-processing is
    left alone, so a newline written afterwards still returns the carriage.
    """

    def __init__(self, fd: int):
        self.fd = fd
        self._saved_attrs: list | None = None
        self._reader_loop: asyncio.AbstractEventLoop | None = None
        self._soon: asyncio.Handle | None = None

    def isatty(self) -> bool:
        return os.isatty(self.fd)

    @property
    def is_raw(self) -> bool:
        lflag = termios.tcgetattr(self.fd)[_LFLAG]
        return (lflag & (termios.ICANON | termios.ECHO)) == 0

    def set_raw_mode(self, enabled: bool) -> None:
        if enabled:
            if self._saved_attrs is None:
                self._saved_attrs = termios.tcgetattr(self.fd)
            attrs = termios.tcgetattr(self.fd)
            attrs[_IFLAG] &= ~_RAW_IFLAG_OFF
            attrs[_CFLAG] |= termios.CS8
            attrs[_LFLAG] &= ~_RAW_LFLAG_OFF
            attrs[_CC][termios.VMIN] = 1
            attrs[_CC][termios.VTIME] = 0
            termios.tcsetattr(self.fd, termios.TCSADRAIN, attrs)
        elif self._saved_attrs is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None
        else:
            attrs = termios.tcgetattr(self.fd)
            attrs[_IFLAG] |= termios.ICRNL
            attrs[_LFLAG] |= _RAW_LFLAG_OFF
            termios.tcsetattr(self.fd, termios.TCSADRAIN, attrs)

    def read_byte(self) -> bytes | None:
        """Read one byte without blocking.

        Returns ``None`` when nothing is ready yet and also at end-of-stream;
        the two cannot be told apart here.
        """
        readable, _, _ = select.select([self.fd], [], [], 0)
        if not readable:
            return None
        return os.read(self.fd, 1) or None

    def wait_readable(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` once, on the running loop, when the fd is readable."""
        loop = asyncio.get_running_loop()

        def _ready() -> None:
            self.cancel_wait()
            callback()

        # Regular files are always readable and epoll refuses to watch them.
        if stat.S_ISREG(os.fstat(self.fd).st_mode):
            self._soon = loop.call_soon(_ready)
            return
        loop.add_reader(self.fd, _ready)
        self._reader_loop = loop

    def cancel_wait(self) -> None:
        """Drop a pending :meth:`wait_readable` registration, if any."""
        if self._soon is not None:
            self._soon.cancel()
            self._soon = None
        if self._reader_loop is not None:
            self._reader_loop.remove_reader(self.fd)
            self._reader_loop = None


class StreamInput:
    """Input source over a file-like object with no usable file descriptor.

    Such streams are never terminals and either have data or are at
    end-of-stream, so readability is reported on the next loop tick.
    """

    def __init__(self, stream):
        self.stream = getattr(stream, "buffer", stream)
        self._soon: asyncio.Handle | None = None

    def isatty(self) -> bool:
        return False

    @property
    def is_raw(self) -> bool:
        return False

    def set_raw_mode(self, enabled: bool) -> None:
        raise PreconditionError("raw mode requires a terminal")

    def read_byte(self) -> bytes | None:
        data = self.stream.read(1)
        if isinstance(data, str):
            data = data.encode()
        return data or None

    def wait_readable(self, callback: Callable[[], None]) -> None:
        def _ready() -> None:
            self._soon = None
            callback()

        self._soon = asyncio.get_running_loop().call_soon(_ready)

    def cancel_wait(self) -> None:
        if self._soon is not None:
            self._soon.cancel()
            self._soon = None


def input_source_for(stream) -> InputSource:
    """Wrap ``stream`` (usually ``sys.stdin``) in a suitable input source."""
    try:
        fd = stream.fileno()
    except (AttributeError, OSError, ValueError):
        return StreamInput(stream)
    return TerminalInput(fd)
