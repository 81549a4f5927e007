"""SSH-related data models."""

import os
from dataclasses import dataclass, field


@dataclass
class ConnectionParams:
    """Where and as whom to connect.

    Either ``password`` or ``key_file`` (or both) may be given. With neither,
    asyncssh falls back to the SSH agent and the default client keys.
    """

    host: str
    user: str
    port: int = 22
    password: str | None = field(default=None, repr=False)
    key_file: str | None = None

    def __post_init__(self) -> None:
        """Validate required fields and expand the key path."""
        if not self.host or not self.host.strip():
            raise ValueError("host must not be empty")
        if not self.user or not self.user.strip():
            raise ValueError("user must not be empty")
        if self.port <= 0 or self.port > 65535:
            raise ValueError(f"port must be in 1..65535, got {self.port}")
        if self.key_file:
            self.key_file = os.path.expanduser(self.key_file)

    @property
    def display_name(self) -> str:
        """user@host:port, used in log messages."""
        return f"{self.user}@{self.host}:{self.port}"

    @classmethod
    def from_target(
        cls,
        target: str,
        *,
        port: int | None = None,
        password: str | None = None,
        key_file: str | None = None,
        default_port: int = 22,
    ) -> "ConnectionParams":
        """Parse a ``user@host[:port]`` target string.

        IPv6 addresses with a port must be bracketed, e.g. ``root@[::1]:2222``.
        An explicit ``port`` argument wins over the port in the target.

        Raises:
            ValueError: If the target has no user or no host, or a bad port.
        """
        user, sep, rest = target.rpartition("@")
        if not sep or not user:
            raise ValueError(f"Target must look like user@host[:port]: {target!r}")

        host = rest
        target_port: int | None = None
        if rest.startswith("["):
            end = rest.find("]")
            if end == -1:
                raise ValueError(f"Unclosed bracket in target: {target!r}")
            host = rest[1:end]
            tail = rest[end + 1 :]
            if tail:
                if not tail.startswith(":"):
                    raise ValueError(f"Unexpected text after host: {target!r}")
                target_port = _parse_port(tail[1:], target)
        elif rest.count(":") == 1:
            host, _, port_str = rest.partition(":")
            target_port = _parse_port(port_str, target)

        if port is None:
            port = target_port if target_port is not None else default_port

        return cls(
            host=host,
            user=user,
            port=port,
            password=password,
            key_file=key_file,
        )


def _parse_port(value: str, target: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Invalid port in target: {target!r}") from None
