"""Run shell commands sequentially on a remote host over SSH."""

from sshrun.api import exec_single, exec_single_status, run_sequence
from sshrun.config import Config
from sshrun.models import CommandResult, ConnectionParams, ResultSequence
from sshrun.services import (
    ConnectionError,
    SSHSessionProvider,
    all_succeeded,
    collect_console,
    collect_stderr,
    collect_stdout,
)

__all__ = [
    "CommandResult",
    "Config",
    "ConnectionError",
    "ConnectionParams",
    "ResultSequence",
    "SSHSessionProvider",
    "all_succeeded",
    "collect_console",
    "collect_stderr",
    "collect_stdout",
    "exec_single",
    "exec_single_status",
    "run_sequence",
]
