"""Services for sshrun."""

from sshrun.services.aggregate import (
    all_succeeded,
    collect_console,
    collect_stderr,
    collect_stdout,
)
from sshrun.services.connection import ConnectionError, SSHSessionProvider
from sshrun.services.runner import (
    CommandSession,
    exec_command,
    exec_status,
    run_commands,
)

__all__ = [
    "CommandSession",
    "ConnectionError",
    "SSHSessionProvider",
    "all_succeeded",
    "collect_console",
    "collect_stderr",
    "collect_stdout",
    "exec_command",
    "exec_status",
    "run_commands",
]
