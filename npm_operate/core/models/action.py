"""
Action and Receipt models — the command execution contract.

An Action names one external command to run against one package.
A Receipt records how it went. Adapters take Actions and hand back
Receipts; they never raise. The dependency operations layer decides
whether a failed Receipt aborts the batch.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Action(BaseModel):
    """One external command, e.g. ``npm install left-pad -w web``."""

    id: str                          # e.g. "install:web:left-pad"
    adapter: str = "shell"
    command: str
    cwd: str = "."
    for_package: str | None = None   # target package name
    dependency: str | None = None    # dependency being added or removed


class Receipt(BaseModel):
    """Result of running an Action.

    ``return_code`` is None when the process never started.
    """

    adapter: str
    action_id: str
    command: str = ""
    status: Literal["ok", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    return_code: int | None = None
    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, adapter: str, action_id: str, output: str = "", **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="ok", output=output, **kwargs)

    @classmethod
    def failure(cls, adapter: str, action_id: str, error: str, **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="failed", error=error, **kwargs)
