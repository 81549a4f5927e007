"""Data models for sshrun."""

from sshrun.models.command import CommandResult, ResultSequence
from sshrun.models.ssh import ConnectionParams

__all__ = [
    "CommandResult",
    "ConnectionParams",
    "ResultSequence",
]
