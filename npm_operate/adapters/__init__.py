"""Adapters — how commands actually get run.

Public re-exports for convenient access.
"""

from npm_operate.adapters.base import Adapter, ExecutionContext
from npm_operate.adapters.mock import MockAdapter
from npm_operate.adapters.shell.command import ShellCommandAdapter

__all__ = [
    "Adapter",
    "ExecutionContext",
    "MockAdapter",
    "ShellCommandAdapter",
]
