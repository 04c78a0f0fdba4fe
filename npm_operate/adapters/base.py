"""
Adapter base — the contract between dependency operations and the tools.

Operations never spawn processes themselves. They build an Action,
wrap it in an ExecutionContext and hand it to an Adapter, which runs it
(or pretends to) and returns a Receipt.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel, Field

from npm_operate.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """Everything an adapter needs to run one Action."""

    action: Action
    project_root: str = "."
    env: dict[str, str] = Field(default_factory=dict)

    @property
    def working_dir(self) -> str:
        """The action's cwd, resolved against the project root if relative."""
        cwd = Path(self.action.cwd)
        if cwd.is_absolute():
            return str(cwd)
        return str(Path(self.project_root) / cwd)


class Adapter(ABC):
    """Abstract base class for command adapters.

    Adapters perform external side effects and return receipts.
    They NEVER raise — failures are captured in the Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g. 'shell', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the adapter can run anything at all. Fast, never raises."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Check the action can run.

        Returns:
            (is_valid, error_message). error_message is empty if valid.
        """

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Run the action and return a receipt. MUST never raise."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
