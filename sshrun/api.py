"""Caller-facing API: connect, run, disconnect.

Every function here owns its connection for exactly one call and closes
it on every exit path, whether the commands succeed, stop early or the
transport fails.

Example:

    params = ConnectionParams(host="remote.host.io", user="nane", password="secret")
    results = await run_sequence(params, [
        "touch helloworld.txt",
        "echo 'Hello World' >> helloworld.txt",
        "cat helloworld.txt",
        "rm helloworld.txt",
    ])
    if all_succeeded(results):
        print(collect_stdout(results))
"""

import logging
from collections.abc import Iterable

from sshrun.config import Config
from sshrun.models import ConnectionParams, ResultSequence
from sshrun.protocols import SessionProvider
from sshrun.services.connection import SSHSessionProvider
from sshrun.services.runner import exec_command, exec_status, run_commands

logger = logging.getLogger(__name__)


def _resolve(
    provider: SessionProvider | None, config: Config | None
) -> tuple[SessionProvider, Config]:
    config = config or Config()
    if provider is None:
        provider = SSHSessionProvider(config)
    return provider, config


async def run_sequence(
    params: ConnectionParams,
    commands: Iterable[str],
    verbose: bool | None = None,
    *,
    provider: SessionProvider | None = None,
    config: Config | None = None,
) -> ResultSequence:
    """Run commands in order over one SSH session.

    Execution stops after the first command that does not exit with 0.

    Args:
        params: Host, user and credential.
        commands: Shell commands to run.
        verbose: Mirror remote output locally; defaults to ``config.verbose``.
        provider: Session provider, defaults to asyncssh.
        config: Settings, defaults to ``Config()``.

    Returns:
        Results up to and including the first failing command.

    Raises:
        ConnectionError: On any transport failure.
    """
    provider, config = _resolve(provider, config)
    if verbose is None:
        verbose = config.verbose

    async with provider.connect(params) as conn:
        results = await run_commands(conn, commands, verbose, encoding=config.encoding)

    logger.debug("Ran %d command(s) on %s", len(results), params.display_name)
    return results


async def exec_single(
    params: ConnectionParams,
    command: str,
    *,
    provider: SessionProvider | None = None,
    config: Config | None = None,
) -> str:
    """Run one command and return its merged console output.

    Raises:
        ConnectionError: On any transport failure.
    """
    provider, config = _resolve(provider, config)
    async with provider.connect(params) as conn:
        return await exec_command(conn, command, encoding=config.encoding)


async def exec_single_status(
    params: ConnectionParams,
    command: str,
    verbose: bool | None = None,
    *,
    provider: SessionProvider | None = None,
    config: Config | None = None,
) -> tuple[int | None, str, str]:
    """Run one command and return (exit_code, stdout, stderr).

    Raises:
        ConnectionError: On any transport failure.
    """
    provider, config = _resolve(provider, config)
    if verbose is None:
        verbose = config.verbose

    async with provider.connect(params) as conn:
        return await exec_status(conn, command, verbose, encoding=config.encoding)
