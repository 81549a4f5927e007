"""Configuration management for sshrun."""

import logging
import os
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


def _get_env_int(key: str) -> int | None:
    """Read an integer environment variable, ignoring unparsable values."""
    if val := os.getenv(key):
        with suppress(ValueError):
            return int(val)
        logger.warning("Ignoring non-integer value for %s: %r", key, val)
    return None


@dataclass
class Config:
    """sshrun configuration.

    Every field can be overridden through an ``SSHRUN_*`` environment
    variable. Explicit constructor arguments are applied first and the
    environment wins, so tests that need isolation should clear the
    relevant variables with ``monkeypatch``.
    """

    default_port: int = 22
    connect_timeout: int = 30  # seconds, 0 disables
    encoding: str = "utf-8"
    verbose: bool = False
    # "" = default ~/.ssh/known_hosts, "none" = no verification
    known_hosts: str = ""

    def __post_init__(self) -> None:
        """Apply environment variable overrides."""
        val = _get_env_int("SSHRUN_PORT")
        if val is not None:
            if 0 < val <= 65535:
                self.default_port = val
            else:
                logger.warning(
                    "SSHRUN_PORT must be in 1..65535, got %d. Using default: %d",
                    val,
                    self.default_port,
                )

        val = _get_env_int("SSHRUN_CONNECT_TIMEOUT")
        if val is not None:
            if val < 0:
                logger.warning(
                    "SSHRUN_CONNECT_TIMEOUT must be >= 0, got %d. Using default: %d",
                    val,
                    self.connect_timeout,
                )
            else:
                self.connect_timeout = val

        if encoding := os.getenv("SSHRUN_ENCODING"):
            self.encoding = encoding

        if verbose := os.getenv("SSHRUN_VERBOSE", "").lower():
            self.verbose = verbose in ("true", "1", "yes", "on")

        if (known_hosts := os.getenv("SSHRUN_KNOWN_HOSTS")) is not None:
            self.known_hosts = known_hosts.strip()

        logger.debug(
            "Config initialized: default_port=%d, connect_timeout=%d, "
            "encoding=%s, verbose=%s",
            self.default_port,
            self.connect_timeout,
            self.encoding,
            self.verbose,
        )

    @property
    def connect_timeout_or_none(self) -> int | None:
        """Connect timeout as asyncssh expects it (None means wait forever)."""
        return self.connect_timeout or None

    @property
    def known_hosts_path(self) -> str | None:
        """Path to the known_hosts file, or None to skip host key checks.

        Returns None for the special value "none", and also when no value
        is configured and ``~/.ssh/known_hosts`` does not exist.

        Raises:
            FileNotFoundError: If an explicitly configured file is missing.
        """
        value = self.known_hosts

        if value.lower() == "none":
            logger.warning("SSH host key verification disabled (known_hosts=none)")
            return None

        if value:
            custom_path = Path(os.path.expanduser(value))
            if not custom_path.exists():
                raise FileNotFoundError(
                    f"Configured known_hosts file not found: {custom_path}"
                )
            return str(custom_path)

        default = Path.home() / ".ssh" / "known_hosts"
        if not default.exists():
            logger.warning(
                "No known_hosts file at %s, host key verification disabled",
                default,
            )
            return None
        return str(default)
