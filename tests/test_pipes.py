# test_pipes.py
#
# Tests:
# - writing to a stdout pipe with no reader exits with status 0
# - works as a decorator
# - BrokenPipeError from a socket propagates and stdout is left alone
# - BrokenPipeError while stdout is healthy propagates
# - other OSErrors propagate unchanged
# - a clean body returns normally
# - _stdout_broken: pipe with and without a reader, stdout with no fd
# - stdout without a file descriptor is not redirected

import errno
import io
import os
import socket
from unittest.mock import patch

import pytest

from cmdutil.pipes import _silence_stdout, _stdout_broken, exit_on_epipe


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def stdout_pipe(monkeypatch):
    """Replace sys.stdout with the write end of a fresh pipe; yield the read fd."""
    read_fd, write_fd = os.pipe()
    out = os.fdopen(write_fd, "w")
    monkeypatch.setattr("sys.stdout", out)
    yield read_fd
    out.close()
    os.close(read_fd)


@pytest.fixture
def broken_stdout(monkeypatch):
    """sys.stdout is a pipe whose reader has gone away."""
    read_fd, write_fd = os.pipe()
    os.close(read_fd)
    out = os.fdopen(write_fd, "w")
    monkeypatch.setattr("sys.stdout", out)
    yield out
    # Tests that exit quietly point the fd at /dev/null, so this close succeeds.
    try:
        out.close()
    except BrokenPipeError:
        pass


# ---------------------------------------------------------------------------
# exit_on_epipe
# ---------------------------------------------------------------------------

class TestExitOnEpipe:
    def test_broken_stdout_exits_zero(self, broken_stdout):
        with pytest.raises(SystemExit) as exc_info:
            with exit_on_epipe():
                print("x" * 100, flush=True)
        assert exc_info.value.code == 0

    def test_unflushed_output_exits_zero(self, broken_stdout):
        with pytest.raises(SystemExit) as exc_info:
            with exit_on_epipe():
                print("buffered")
        assert exc_info.value.code == 0

    def test_decorator(self, broken_stdout):
        @exit_on_epipe()
        def main():
            print("hello", flush=True)

        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 0

    @patch("cmdutil.pipes._silence_stdout")
    def test_socket_broken_pipe_propagates(self, mock_silence, capsys):
        a, b = socket.socketpair()
        try:
            b.close()
            with pytest.raises(BrokenPipeError):
                with exit_on_epipe():
                    a.send(b"x")
        finally:
            a.close()
        mock_silence.assert_not_called()

    @patch("cmdutil.pipes._silence_stdout")
    def test_healthy_stdout_propagates(self, mock_silence, stdout_pipe):
        with pytest.raises(BrokenPipeError):
            with exit_on_epipe():
                raise BrokenPipeError(errno.EPIPE, "Broken pipe")
        mock_silence.assert_not_called()

    @patch("cmdutil.pipes._silence_stdout")
    def test_other_errors_propagate(self, mock_silence):
        with pytest.raises(OSError) as exc_info:
            with exit_on_epipe():
                raise OSError(errno.ENOSPC, "No space left on device")
        assert exc_info.value.errno == errno.ENOSPC
        mock_silence.assert_not_called()

    def test_clean_body(self, capsys):
        with exit_on_epipe():
            print("hello")
        assert capsys.readouterr().out == "hello\n"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class TestStdoutBroken:
    def test_pipe_with_reader(self, stdout_pipe):
        assert not _stdout_broken()

    def test_pipe_without_reader(self, broken_stdout):
        assert _stdout_broken()

    def test_no_fileno(self, monkeypatch):
        monkeypatch.setattr("sys.stdout", io.StringIO())
        assert not _stdout_broken()


class TestSilenceStdout:
    def test_no_fileno(self, monkeypatch):
        monkeypatch.setattr("sys.stdout", io.StringIO())
        _silence_stdout()  # should not raise

    @patch("cmdutil.pipes.os.dup2")
    def test_redirects_fd(self, mock_dup2, monkeypatch, tmp_path):
        with open(tmp_path / "out", "w") as f:
            monkeypatch.setattr("sys.stdout", f)
            _silence_stdout()
            assert mock_dup2.call_args.args[1] == f.fileno()
