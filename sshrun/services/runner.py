"""Sequential remote command execution over one SSH connection.

Each command gets its own exec channel. Output arrives through
``CommandSession`` callbacks, driven by asyncssh's event loop, and is
read out only once the channel has closed. Data may still arrive after
the exit status has been reported.
"""

import logging
import sys
from collections.abc import Iterable
from typing import IO, TYPE_CHECKING

import asyncssh

from sshrun.models import CommandResult, ResultSequence
from sshrun.services.connection import TRANSPORT_ERRORS, ConnectionError

if TYPE_CHECKING:
    from asyncssh import SSHClientConnection

logger = logging.getLogger(__name__)


def _echo(stream: IO[str], data: str) -> None:
    stream.write(data)
    stream.flush()


def _peer_name(conn: "SSHClientConnection") -> str:
    """Best-effort host name of a connection for error messages.

    Must be read while the connection is alive; asyncssh stops reporting
    the peer once the transport is gone.
    """
    peer = conn.get_extra_info("peername")
    if peer:
        return str(peer[0])
    return "unknown"


class CommandSession(asyncssh.SSHClientSession):
    """Collects stdout, stderr and the exit status of one command."""

    def __init__(self, command: str, verbose: bool = False) -> None:
        self.command = command
        self.verbose = verbose
        self.exit_code: int | None = None
        self.error: Exception | None = None
        self._stdout: list[str] = []
        self._stderr: list[str] = []

    def data_received(self, data: str, datatype: int | None) -> None:
        if datatype == asyncssh.EXTENDED_DATA_STDERR:
            self._stderr.append(data)
            if self.verbose:
                _echo(sys.stderr, data)
        else:
            self._stdout.append(data)
            if self.verbose:
                _echo(sys.stdout, data)

    def exit_status_received(self, status: int) -> None:
        self.exit_code = status

    def connection_lost(self, exc: Exception | None) -> None:
        # exc is None on a clean channel close
        self.error = exc

    def result(self) -> CommandResult:
        """Snapshot of everything received so far."""
        return CommandResult(
            exit_code=self.exit_code,
            stdout="".join(self._stdout),
            stderr="".join(self._stderr),
            command=self.command,
        )


async def _run_one(
    conn: "SSHClientConnection",
    command: str,
    verbose: bool,
    encoding: str,
    host_name: str,
) -> CommandResult:
    """Run a single command on its own channel and wait for it to close.

    Raises:
        ConnectionError: If the channel cannot be opened or the transport
            drops while the command is running.
    """
    try:
        chan, session = await conn.create_session(
            lambda: CommandSession(command, verbose),
            command,
            encoding=encoding,
            errors="replace",
        )
        await chan.wait_closed()
    except TRANSPORT_ERRORS as e:
        logger.error("Channel for %r failed: %s", command, e)
        raise ConnectionError(host_name, e) from e

    if session.error is not None:
        logger.error("Connection lost while running %r: %s", command, session.error)
        raise ConnectionError(host_name, session.error) from session.error

    return session.result()


async def run_commands(
    conn: "SSHClientConnection",
    commands: Iterable[str],
    verbose: bool = False,
    *,
    encoding: str = "utf-8",
) -> ResultSequence:
    """Execute commands one after another, stopping at the first failure.

    A command fails when its exit code is anything other than 0, including
    when no exit code was reported at all. The failing command's result is
    the last entry; later commands are never started.

    The connection is left open. Closing it is the caller's job.

    Args:
        conn: Open SSH connection.
        commands: Shell command strings, run in order.
        verbose: Mirror output to local stdout/stderr as it arrives.
        encoding: Encoding used to decode remote output.

    Returns:
        Tuple of CommandResult in submission order.

    Raises:
        ConnectionError: On transport failure. Results collected so far
            are discarded.
    """
    if isinstance(commands, str):
        commands = [commands]

    host_name = _peer_name(conn)
    results: list[CommandResult] = []

    for command in commands:
        logger.debug("Running %r", command)
        result = await _run_one(conn, command, verbose, encoding, host_name)
        results.append(result)

        if result.exit_code != 0:
            logger.info(
                "Command %r failed with exit code %s, skipping remaining commands",
                command,
                result.exit_code,
            )
            break

    return tuple(results)


async def exec_command(
    conn: "SSHClientConnection", command: str, *, encoding: str = "utf-8"
) -> str:
    """Run one command and return its merged stdout and stderr.

    No exit code is reported. Use ``exec_status`` when it matters.
    Undecodable bytes are replaced rather than dropping the output.

    Raises:
        ConnectionError: On transport failure.
    """
    host_name = _peer_name(conn)
    try:
        result = await conn.run(
            command,
            stderr=asyncssh.STDOUT,
            check=False,
            encoding=encoding,
            errors="replace",
        )
    except TRANSPORT_ERRORS as e:
        logger.error("Exec of %r failed: %s", command, e)
        raise ConnectionError(host_name, e) from e

    return result.stdout or ""


async def exec_status(
    conn: "SSHClientConnection",
    command: str,
    verbose: bool = False,
    *,
    encoding: str = "utf-8",
) -> tuple[int | None, str, str]:
    """Run one command and return (exit_code, stdout, stderr)."""
    results = await run_commands(conn, [command], verbose, encoding=encoding)
    last = results[-1]
    return last.exit_code, last.stdout, last.stderr
