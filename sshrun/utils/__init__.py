"""Utilities for sshrun."""

from sshrun.utils.console import ColorfulFormatter

__all__ = ["ColorfulFormatter"]
