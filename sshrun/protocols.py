"""Protocol interfaces for dependency inversion.

The caller-facing API depends on a ``SessionProvider`` rather than on
asyncssh directly, so tests and alternative transports can hand in any
object that yields a connected session.

Usage Example:

    from sshrun.protocols import SessionProvider

    async def uptime(provider: SessionProvider, params: ConnectionParams):
        async with provider.connect(params) as conn:
            return await exec_command(conn, "uptime")

    # Real SSH
    await uptime(SSHSessionProvider(Config()), params)

    # Or a stub for testing
    class StubProvider:
        def connect(self, params):
            return stub_connection_context()

    await uptime(StubProvider(), params)
"""

from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol, runtime_checkable

from sshrun.models import ConnectionParams


@runtime_checkable
class SessionProvider(Protocol):
    """Protocol for opening one authenticated SSH session.

    ``connect`` returns an async context manager. Entering it yields a
    connection exposing ``create_session``, ``run`` and
    ``get_extra_info`` the way ``asyncssh.SSHClientConnection`` does.
    Leaving it closes the connection.
    """

    def connect(self, params: ConnectionParams) -> AbstractAsyncContextManager[Any]:
        """Open a session to the host described by params.

        Raises:
            ConnectionError: If the session cannot be established.
        """
        ...
