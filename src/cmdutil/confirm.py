"""Single-keypress yes/no confirmation.

:func:`confirm` writes a prompt and reads one byte from the input. If the
input is a terminal it is switched to raw mode for the duration, so the
answer does not need a newline. The answer is "yes" only when that byte is
``y`` or ``Y``; anything else, including end-of-stream, is "no".

Known limitations:

* If the input reached end-of-stream before the prompt and the source never
  reports itself readable again, the returned future never resolves. There is
  no portable way to detect an earlier end-of-stream on an interactive stream,
  so this is left as is rather than guessed at.
* Only one confirmation may be outstanding per input source. Raw mode is
  process-wide terminal state and concurrent calls are not serialized.

The future is never cancelled or timed out by this module, and this module
never exits the process; what to do with the answer is up to the caller. If
the caller cancels the future, the readability wait is dropped and the
terminal mode is restored.
"""

import asyncio
import sys

import click

from .errors import PreconditionError
from .terminal import InputSource, input_source_for


class Confirmation:
    """State for one pending confirmation prompt."""

    def __init__(
        self,
        message: str,
        instream: InputSource,
        outstream,
        loop: asyncio.AbstractEventLoop,
    ):
        self.message = message
        self.instream = instream
        self.outstream = outstream
        self.in_tty = False
        self.in_raw = False  # raw flag before we touched it
        self.read: bytes | None = None
        self._loop = loop
        self._finish_handle: asyncio.Handle | None = None
        self._restored = False
        self.future: asyncio.Future = loop.create_future()

    @property
    def enabled_raw_mode(self) -> bool:
        return self.in_tty and not self.in_raw

    def start(self) -> asyncio.Future:
        self.in_tty = self.instream.isatty()
        if self.in_tty:
            self.in_raw = self.instream.is_raw
            if not self.in_raw:
                self.instream.set_raw_mode(True)

        try:
            click.echo(self.message, file=self.outstream, nl=False)
            self.read = self.instream.read_byte()
            if self.read is None:
                self.instream.wait_readable(self._on_readable)
            else:
                # Resolve on a later tick even when the answer is already here.
                self._finish_handle = self._loop.call_soon(self._finish)
        except BaseException:
            self._restore()
            raise

        self.future.add_done_callback(self._on_done)
        return self.future

    def _restore(self) -> None:
        if self.enabled_raw_mode and not self._restored:
            self._restored = True
            self.instream.set_raw_mode(False)

    def _on_done(self, future: asyncio.Future) -> None:
        # The caller cancelled us (wait_for, task cancellation): stop listening
        # and give the terminal back.
        if future.cancelled():
            if self._finish_handle is not None:
                self._finish_handle.cancel()
            self.instream.cancel_wait()
            self._restore()

    def _on_readable(self) -> None:
        # Nothing to read after a readability signal means end-of-stream.
        self.read = self.instream.read_byte()
        self._finish()

    def _finish(self) -> None:
        self._finish_handle = None
        click.echo("", file=self.outstream)
        self._restore()

        result = self.read is not None and self.read.lower() == b"y"
        if not self.future.done():
            self.future.set_result(result)


def confirm(
    message: str,
    *,
    instream: InputSource | None = None,
    outstream=None,
) -> asyncio.Future:
    """Prompt with ``message`` and resolve to ``True`` if the user pressed y.

    Must be called from a running event loop. The result is an
    :class:`asyncio.Future` that resolves exactly once; await it or attach a
    done callback.

    Parameters
    ----------
    message:
        Prompt text, written without a trailing newline.
    instream:
        Input source; defaults to :func:`~cmdutil.terminal.input_source_for`
        on ``sys.stdin``.
    outstream:
        Text stream for the prompt; defaults to ``sys.stdout``.
    """
    if not isinstance(message, str) or not message:
        raise PreconditionError("message must be a non-empty string")
    loop = asyncio.get_running_loop()
    if instream is None:
        instream = input_source_for(sys.stdin)
    if outstream is None:
        outstream = sys.stdout
    return Confirmation(message, instream, outstream, loop).start()


def confirm_blocking(
    message: str,
    *,
    instream: InputSource | None = None,
    outstream=None,
) -> bool:
    """Synchronous :func:`confirm` for scripts without an event loop."""

    async def _ask() -> bool:
        return await confirm(message, instream=instream, outstream=outstream)

    return asyncio.run(_ask())
