"""Shared fixtures: a scripted stand-in for an asyncssh connection.

``FakeConnection`` hands the real ``CommandSession`` objects the same
callbacks asyncssh would (data, extended data, exit status, close), so
the runner is exercised end to end without a network.
"""

import os
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager
from types import SimpleNamespace
from typing import Any

import asyncssh
import pytest

from sshrun.config import Config
from sshrun.models import ConnectionParams

# Event kinds understood by FakeChannel
OUT = "out"
ERR = "err"
EXIT = "exit"
LOST = "lost"


def shell_events(command: str) -> list[tuple[str, Any]]:
    """Rough emulation of a remote shell for commands with no script."""
    if command.startswith("echo "):
        text = command[len("echo ") :].strip().strip("'\"")
        return [(OUT, f"{text}\n"), (EXIT, 0)]
    if command == "true":
        return [(EXIT, 0)]
    word = command.split()[0] if command.split() else command
    return [(ERR, f"bash: {word}: command not found\n"), (EXIT, 127)]


def _text(value: str | bytes, kwargs: dict[str, Any]) -> str:
    """Decode raw event bytes the way asyncssh would for a channel."""
    if isinstance(value, bytes):
        return value.decode(
            kwargs.get("encoding", "utf-8"), kwargs.get("errors", "strict")
        )
    return value


class FakeChannel:
    """Delivers scripted events to a session when awaited."""

    def __init__(
        self,
        connection: "FakeConnection",
        session: Any,
        events: list[tuple[str, Any]],
        kwargs: dict[str, Any],
    ) -> None:
        self.connection = connection
        self.session = session
        self.events = events
        self.kwargs = kwargs

    async def wait_closed(self) -> None:
        for kind, value in self.events:
            if kind == OUT:
                self.session.data_received(_text(value, self.kwargs), None)
            elif kind == ERR:
                self.session.data_received(
                    _text(value, self.kwargs), asyncssh.EXTENDED_DATA_STDERR
                )
            elif kind == EXIT:
                self.session.exit_status_received(value)
            elif kind == LOST:
                # a dead transport no longer knows its peer
                self.connection.peer = None
                self.session.connection_lost(value)
                return
        self.session.connection_lost(None)


class FakeConnection:
    """Minimal asyncssh.SSHClientConnection replacement."""

    def __init__(self, peer: tuple[str, int] | None = ("test-host", 22)) -> None:
        self.peer = peer
        self.scripts: dict[str, list[tuple[str, Any]]] = {}
        self.open_errors: dict[str, BaseException] = {}
        self.executed: list[str] = []
        self.create_session_kwargs: list[dict[str, Any]] = []
        self.run_kwargs: list[dict[str, Any]] = []
        self.closed = False

    def script(self, command: str, *events: tuple[str, Any]) -> None:
        self.scripts[command] = list(events)

    def fail_open(self, command: str, error: BaseException) -> None:
        self.open_errors[command] = error

    def _events(self, command: str) -> list[tuple[str, Any]]:
        if command in self.scripts:
            return self.scripts[command]
        return shell_events(command)

    async def create_session(
        self, session_factory: Any, command: str, **kwargs: Any
    ) -> tuple[FakeChannel, Any]:
        if command in self.open_errors:
            raise self.open_errors[command]
        self.executed.append(command)
        self.create_session_kwargs.append(kwargs)
        session = session_factory()
        return FakeChannel(self, session, self._events(command), kwargs), session

    async def run(self, command: str, **kwargs: Any) -> SimpleNamespace:
        if command in self.open_errors:
            raise self.open_errors[command]
        self.executed.append(command)
        self.run_kwargs.append(kwargs)
        events = self._events(command)
        merged = "".join(
            _text(value, kwargs) for kind, value in events if kind in (OUT, ERR)
        )
        codes = [value for kind, value in events if kind == EXIT]
        code = codes[-1] if codes else None
        return SimpleNamespace(stdout=merged, exit_status=code, returncode=code)

    def get_extra_info(self, name: str, default: Any = None) -> Any:
        if name == "peername":
            return self.peer
        return default


class FakeProvider:
    """SessionProvider yielding one FakeConnection, or failing to connect."""

    def __init__(
        self, connection: FakeConnection, error: BaseException | None = None
    ) -> None:
        self.connection = connection
        self.error = error
        self.connected_with: list[ConnectionParams] = []

    @asynccontextmanager
    async def connect(self, params: ConnectionParams) -> AsyncIterator[FakeConnection]:
        self.connected_with.append(params)
        if self.error is not None:
            raise self.error
        try:
            yield self.connection
        finally:
            self.connection.closed = True


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep SSHRUN_* settings from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("SSHRUN_") and not key.startswith("SSHRUN_TEST_"):
            monkeypatch.delenv(key)
    yield


@pytest.fixture
def connection() -> FakeConnection:
    """Scripted SSH connection."""
    return FakeConnection()


@pytest.fixture
def provider(connection: FakeConnection) -> FakeProvider:
    """Provider handing out the connection fixture."""
    return FakeProvider(connection)


@pytest.fixture
def params() -> ConnectionParams:
    """Connection parameters for the fake host."""
    return ConnectionParams(host="test-host", user="nane", port=2222, password="secret")


@pytest.fixture
def config() -> Config:
    """Config with host key checks off and defaults otherwise."""
    return Config(known_hosts="none")
