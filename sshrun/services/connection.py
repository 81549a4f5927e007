"""SSH session provider built on asyncssh."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncssh

from sshrun.config import Config
from sshrun.models import ConnectionParams

logger = logging.getLogger(__name__)


class ConnectionError(Exception):
    """SSH transport failure: connect, authenticate, or channel loss."""

    def __init__(self, host_name: str, original_error: BaseException):
        """Initialize connection error.

        Args:
            host_name: Host the failure relates to
            original_error: Exception raised by the transport
        """
        self.host_name = host_name
        self.original_error = original_error
        super().__init__(f"Cannot connect to {host_name}: {original_error}")


# Exceptions asyncssh and the socket layer raise for transport problems.
TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    asyncssh.Error,
    asyncssh.ChannelOpenError,
    OSError,
    asyncio.TimeoutError,
)


class SSHSessionProvider:
    """Opens one asyncssh connection per ``connect`` call.

    No pooling and no retries: every call authenticates from scratch and
    failures surface immediately as ConnectionError.
    """

    def __init__(self, config: Config | None = None) -> None:
        """Initialize provider.

        Args:
            config: Transport settings, defaults to ``Config()``

        Raises:
            FileNotFoundError: If a configured known_hosts file is missing
        """
        self.config = config or Config()
        self._known_hosts = self.config.known_hosts_path

    @asynccontextmanager
    async def connect(
        self, params: ConnectionParams
    ) -> AsyncIterator[asyncssh.SSHClientConnection]:
        """Connect to params.host and close the connection on exit.

        Raises:
            ConnectionError: If the connection cannot be established
        """
        logger.info("Opening SSH connection to %s", params.display_name)
        client_keys = [params.key_file] if params.key_file else ()

        try:
            conn = await asyncssh.connect(
                params.host,
                port=params.port,
                username=params.user,
                password=params.password,
                client_keys=client_keys,
                known_hosts=self._known_hosts,
                connect_timeout=self.config.connect_timeout_or_none,
            )
        except TRANSPORT_ERRORS as e:
            logger.error("Connection to %s failed: %s", params.display_name, e)
            raise ConnectionError(params.host, e) from e

        logger.debug("SSH connection established to %s", params.display_name)
        try:
            yield conn
        finally:
            logger.debug("Closing SSH connection to %s", params.display_name)
            conn.close()
            await conn.wait_closed()
