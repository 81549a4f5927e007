"""Command execution data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one remote command.

    ``exit_code`` is None when the remote side never reported an exit
    status. That is a failure, not a success.
    """

    exit_code: int | None
    stdout: str
    stderr: str
    command: str

    @property
    def succeeded(self) -> bool:
        """Whether the command exited with status 0."""
        return self.exit_code == 0

    @property
    def console(self) -> str:
        """Standard output immediately followed by standard error."""
        return self.stdout + self.stderr


# Ordered results of one run, ending at the first failing command.
ResultSequence = tuple[CommandResult, ...]
