"""Summaries over a sequence of command results.

All functions are pure. Fragments are joined as-is, with no separator;
entries whose text is empty or whitespace-only contribute nothing.
"""

from collections.abc import Iterable

from sshrun.models import CommandResult


def _join_non_blank(fragments: Iterable[str]) -> str:
    return "".join(fragment for fragment in fragments if fragment.strip())


def all_succeeded(results: Iterable[CommandResult]) -> bool:
    """True if every command exited with 0. Empty input counts as success."""
    return all(result.exit_code == 0 for result in results)


def collect_stdout(results: Iterable[CommandResult]) -> str:
    """Concatenate the standard output of all commands."""
    return _join_non_blank(result.stdout for result in results)


def collect_stderr(results: Iterable[CommandResult]) -> str:
    """Concatenate the standard error of all commands."""
    return _join_non_blank(result.stderr for result in results)


def collect_console(results: Iterable[CommandResult]) -> str:
    """Concatenate stdout followed by stderr, command by command."""
    return _join_non_blank(result.console for result in results)
