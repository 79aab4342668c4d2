"""Subprocess primitives."""

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from match_step.errors import SubprocessFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Command:
    """A command line plus where and with which extra env to run it."""
    args: Tuple[str, ...]
    cwd: Optional[str] = None
    env: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.args:
            raise ValueError("command needs at least one argument")
        object.__setattr__(self, "args", tuple(self.args))

    @classmethod
    def of(cls, *args: str, cwd: Optional[str] = None, env: Optional[Dict[str, str]] = None) -> "Command":
        return cls(args=tuple(args), cwd=cwd, env=dict(env or {}))

    def printable(self) -> str:
        """Shell-quoted command line; env values are never rendered."""
        return shlex.join(self.args)

    def merged_env(self) -> Optional[Dict[str, str]]:
        if not self.env:
            return None
        env = os.environ.copy()
        env.update(self.env)
        return env


class CommandRunner:
    """Runs commands with inherited stdin and no timeout."""

    def run(self, command: Command) -> None:
        """Run with the parent's stdin, stdout and stderr."""
        try:
            result = subprocess.run(
                list(command.args),
                cwd=command.cwd,
                env=command.merged_env()
            )
        except OSError as e:
            raise SubprocessFailure(command.printable(), reason=str(e)) from e

        if result.returncode != 0:
            raise SubprocessFailure(command.printable(), returncode=result.returncode)

    def run_and_capture(self, command: Command) -> str:
        """Run with stdout and stderr combined and captured; returns the trimmed output."""
        try:
            result = subprocess.run(
                list(command.args),
                cwd=command.cwd,
                env=command.merged_env(),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace"
            )
        except OSError as e:
            raise SubprocessFailure(command.printable(), reason=str(e)) from e

        output = (result.stdout or "").strip()
        if result.returncode != 0:
            raise SubprocessFailure(
                command.printable(),
                returncode=result.returncode,
                output=output
            )
        logger.debug(f"$ {command.printable()}\n{output}")
        return output

