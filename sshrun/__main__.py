"""Command line entry point for sshrun.

    sshrun [OPTIONS] USER@HOST[:PORT] COMMAND [COMMAND ...]

Runs the commands in order over one SSH session, stopping at the first
failure, and exits with that command's exit code.
"""

import asyncio
import logging
import os
import sys

import click

from sshrun.api import exec_single, run_sequence
from sshrun.config import Config
from sshrun.models import ConnectionParams
from sshrun.services import ConnectionError, collect_console
from sshrun.utils.console import ColorfulFormatter

logger = logging.getLogger(__name__)

# Exit code when no remote exit status is available.
EXIT_UNKNOWN = 255


def configure_logging() -> None:
    """Install the colorful stderr handler on the sshrun logger.

    Level comes from SSHRUN_LOG_LEVEL (default WARNING). Colors are
    disabled by SSHRUN_LOG_COLORS=false or when stderr is not a TTY.
    """
    log_level = os.getenv("SSHRUN_LOG_LEVEL", "WARNING").upper()
    use_colors = os.getenv("SSHRUN_LOG_COLORS", "true").lower() != "false"
    if not sys.stderr.isatty():
        use_colors = False

    sshrun_logger = logging.getLogger("sshrun")
    sshrun_logger.setLevel(getattr(logging, log_level, logging.WARNING))

    # Only add handler if not already configured
    if not sshrun_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColorfulFormatter(use_colors=use_colors))
        sshrun_logger.addHandler(handler)
        sshrun_logger.propagate = False

    logging.getLogger("asyncssh").setLevel(logging.WARNING)


@click.command()
@click.argument("target")
@click.argument("commands", nargs=-1, required=True)
@click.option("-p", "--port", type=int, help="SSH port (default: target port or 22)")
@click.option(
    "--password",
    envvar="SSHRUN_PASSWORD",
    help="Login password (or set SSHRUN_PASSWORD)",
)
@click.option(
    "-i",
    "--key-file",
    type=click.Path(dir_okay=False),
    help="Private key file to authenticate with",
)
@click.option(
    "-v", "--verbose", is_flag=True, help="Stream remote output as it arrives"
)
@click.option(
    "--merged",
    is_flag=True,
    help="Run a single command and print its merged raw output",
)
@click.option(
    "--known-hosts",
    help="known_hosts file, or 'none' to skip host key checks",
)
def main(
    target: str,
    commands: tuple[str, ...],
    port: int | None,
    password: str | None,
    key_file: str | None,
    verbose: bool,
    merged: bool,
    known_hosts: str | None,
) -> None:
    """Run COMMANDS on TARGET (user@host[:port]) one after another."""
    configure_logging()

    config = Config()
    if known_hosts is not None:
        config.known_hosts = known_hosts
    verbose = verbose or config.verbose

    if merged and len(commands) != 1:
        raise click.UsageError("--merged takes exactly one command")

    try:
        params = ConnectionParams.from_target(
            target,
            port=port,
            password=password,
            key_file=key_file,
            default_port=config.default_port,
        )
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="TARGET") from e

    try:
        if merged:
            output = asyncio.run(exec_single(params, commands[0], config=config))
            click.echo(output, nl=False)
            return

        results = asyncio.run(
            run_sequence(params, commands, verbose, config=config)
        )
    except (ConnectionError, FileNotFoundError) as e:
        click.echo(f"sshrun: {e}", err=True)
        sys.exit(EXIT_UNKNOWN)

    if not verbose:
        click.echo(collect_console(results), nl=False)

    last = results[-1]
    if last.exit_code is None:
        sys.exit(EXIT_UNKNOWN)
    sys.exit(last.exit_code)


if __name__ == "__main__":
    main()
