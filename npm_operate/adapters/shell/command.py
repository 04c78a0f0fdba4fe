"""
Shell command adapter — run a package-manager command line for real.

The child process inherits stdin, stdout and stderr, so npm/yarn
progress output and prompts reach the user directly. The call blocks
until the process exits; there is no timeout and no cancellation.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import time
from pathlib import Path

from npm_operate.adapters.base import Adapter, ExecutionContext
from npm_operate.core.models.action import Receipt

logger = logging.getLogger(__name__)


class ShellCommandAdapter(Adapter):
    """Execute command lines with inherited standard I/O.

    Commands are split with ``shlex`` and run without a shell. The
    executable is resolved on PATH first so ``npm.cmd`` style wrappers
    work too.
    """

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        command = context.action.command.strip()
        if not command:
            return False, "Empty command"

        try:
            argv = shlex.split(command)
        except ValueError as e:
            return False, f"Cannot parse command '{command}': {e}"

        cwd = context.working_dir
        if not Path(cwd).is_dir():
            return False, f"Working directory does not exist: {cwd}"

        if shutil.which(argv[0]) is None:
            return False, f"'{argv[0]}' not found on PATH"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        command = context.action.command
        cwd = context.working_dir
        argv = shlex.split(command)
        argv[0] = shutil.which(argv[0]) or argv[0]
        env = {**os.environ, **context.env} if context.env else None

        logger.info("Running: %s (cwd=%s)", command, cwd)
        start = time.monotonic()

        try:
            result = subprocess.run(argv, cwd=cwd, env=env, check=False)
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                command=command,
                error=f"Command could not start: {e}",
                metadata={"cwd": cwd},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)

        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                action_id=context.action.id,
                command=command,
                return_code=0,
                duration_ms=elapsed_ms,
                metadata={"cwd": cwd},
            )

        logger.debug("Command exited %d: %s", result.returncode, command)
        return Receipt.failure(
            adapter=self.name,
            action_id=context.action.id,
            command=command,
            error=f"Command exited with code {result.returncode}",
            return_code=result.returncode,
            duration_ms=elapsed_ms,
            metadata={"cwd": cwd},
        )
