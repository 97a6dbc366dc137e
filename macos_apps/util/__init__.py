"""Utility module for macos-apps."""

from .shell import ShellResult, run

__all__ = ["ShellResult", "run"]
