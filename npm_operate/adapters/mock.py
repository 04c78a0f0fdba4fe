"""
Mock adapter — records commands instead of running them.

Backs ``--dry-run`` in the CLI and doubles as the test fake for the
dependency operations. Failures can be scripted per action ID or per
command line.
"""

from __future__ import annotations

from npm_operate.adapters.base import Adapter, ExecutionContext
from npm_operate.core.models.action import Receipt


class MockAdapter(Adapter):
    """Succeeds for everything unless told otherwise."""

    def __init__(
        self,
        adapter_name: str = "mock",
        available: bool = True,
        default_output: str = "[dry-run]",
    ):
        self._name = adapter_name
        self._available = available
        self._default_output = default_output
        self._failures: dict[str, tuple[int, str]] = {}
        self._calls: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def calls(self) -> list[ExecutionContext]:
        """Contexts received so far, oldest first."""
        return self._calls

    @property
    def call_count(self) -> int:
        return len(self._calls)

    @property
    def commands(self) -> list[str]:
        """Command lines received, in call order."""
        return [ctx.action.command for ctx in self._calls]

    def is_available(self) -> bool:
        return self._available

    def set_failure(self, key: str, return_code: int = 1, error: str = "Mock failure") -> None:
        """Make the action with this ID, or this exact command line, fail."""
        self._failures[key] = (return_code, error)

    def reset(self) -> None:
        self._failures.clear()
        self._calls.clear()

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        if not context.action.command.strip():
            return False, "Empty command"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self._calls.append(context)
        action = context.action

        failure = self._failures.get(action.id) or self._failures.get(action.command)
        if failure is not None:
            return_code, error = failure
            return Receipt.failure(
                adapter=self._name,
                action_id=action.id,
                command=action.command,
                error=error,
                return_code=return_code,
                metadata={"mock": True, "cwd": context.working_dir},
            )

        return Receipt.success(
            adapter=self._name,
            action_id=action.id,
            command=action.command,
            output=f"{self._default_output} {action.command}",
            return_code=0,
            metadata={"mock": True, "cwd": context.working_dir},
        )
