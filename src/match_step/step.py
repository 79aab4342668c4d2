"""Argument assembly and execution of fastlane match."""

import logging
import shlex
import time
from typing import Dict, List, Optional

from match_step.commands import Command, CommandRunner
from match_step.config import StepConfig, settings
from match_step.errors import OptionParseError
from match_step.models import ResolvedInvocation
from match_step.resolver import ToolResolver

logger = logging.getLogger(__name__)


def split_options(options: str) -> List[str]:
    """Split the free-form options with shell word rules."""
    if not options:
        return []
    try:
        return shlex.split(options)
    except ValueError as e:
        raise OptionParseError(options, str(e)) from e


def build_match_args(config: StepConfig, options: Optional[List[str]] = None) -> List[str]:
    """Build the match arguments; user options come last so they can override."""
    args = [
        settings.subcommand,
        config.type,
        "--readonly",
        "--git_url", config.git_url,
        "--app_identifier", config.app_id,
    ]

    if config.git_branch:
        args += ["--git_branch", config.git_branch]

    if config.team_id:
        args += ["--team_id", config.team_id]

    if options:
        args += options
    return args


def build_env(config: StepConfig) -> Dict[str, str]:
    return {settings.password_env: config.decrypt_password}


class MatchStep:
    """Resolves fastlane and runs match for one configuration."""

    def __init__(
        self,
        config: StepConfig,
        runner: Optional[CommandRunner] = None,
        resolver: Optional[ToolResolver] = None
    ):
        self.config = config
        self.runner = runner or CommandRunner()
        self.resolver = resolver or ToolResolver(self.runner)
        self.invocation: Optional[ResolvedInvocation] = None

    def setup(self) -> float:
        """Resolve fastlane and check it runs; returns elapsed seconds."""
        start_time = time.monotonic()

        self.invocation = self.resolver.resolve(
            self.config.fastlane_version,
            self.config.gemfile_path
        )
        self.check_version(self.invocation)

        return time.monotonic() - start_time

    def check_version(self, invocation: ResolvedInvocation) -> None:
        command = Command.of(*invocation.with_args("-v"), cwd=invocation.workdir)
        logger.info(f"$ {command.printable()}")
        self.runner.run(command)

    def match_command(self) -> Command:
        if self.invocation is None:
            raise RuntimeError("setup() must run before match_command()")

        options = split_options(self.config.options)
        args = build_match_args(self.config, options)
        return Command.of(
            *self.invocation.with_args(*args),
            cwd=self.invocation.workdir,
            env=build_env(self.config)
        )

    def run_match(self) -> None:
        command = self.match_command()
        logger.info(f"$ {command.printable()}")
        self.runner.run(command)
