"""Ruby gem installation."""

import logging
import os
import shutil
from typing import Callable, List, Optional

from match_step.commands import Command, CommandRunner
from match_step.errors import InstallationFailure, SubprocessFailure
from match_step.models import RubyInstallType

logger = logging.getLogger(__name__)

SYSTEM_RUBY_PATH = "/usr/bin/ruby"
BREW_RUBY_PATH = "/usr/local/bin/ruby"


def ruby_install_type(which: Callable[[str], Optional[str]] = shutil.which) -> RubyInstallType:
    """Classify the Ruby found on PATH."""
    ruby = which("ruby")
    if not ruby:
        return RubyInstallType.UNKNOWN

    if ruby == SYSTEM_RUBY_PATH:
        return RubyInstallType.SYSTEM
    if ruby == BREW_RUBY_PATH:
        return RubyInstallType.BREW
    if which("rvm"):
        return RubyInstallType.RVM
    if which("rbenv"):
        return RubyInstallType.RBENV
    return RubyInstallType.UNKNOWN


def gem_install_commands(
    gem: str,
    version: str,
    install_type: RubyInstallType,
    is_root: bool
) -> List[Command]:
    """Build the commands that install ``gem``; an empty version means newest."""
    args = ["gem", "install", gem, "--no-document"]
    if version:
        args += ["-v", version]

    # System Ruby gems live in a root-owned directory
    if install_type == RubyInstallType.SYSTEM and not is_root:
        args.insert(0, "sudo")

    commands = [Command.of(*args)]
    if install_type == RubyInstallType.RBENV:
        commands.append(Command.of("rbenv", "rehash"))
    return commands


class GemInstaller:
    """Installs gems with the tooling of the active Ruby."""

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        install_type: Optional[RubyInstallType] = None,
        is_root: Optional[bool] = None
    ):
        self.runner = runner or CommandRunner()
        self._install_type = install_type
        self.is_root = is_root if is_root is not None else os.geteuid() == 0

    @property
    def install_type(self) -> RubyInstallType:
        if self._install_type is None:
            self._install_type = ruby_install_type()
            logger.debug(f"Ruby install type: {self._install_type.value}")
        return self._install_type

    def install(self, gem: str, version: str = "") -> None:
        """Run one install attempt; raises InstallationFailure on any failing command."""
        for command in gem_install_commands(gem, version, self.install_type, self.is_root):
            logger.info(f"$ {command.printable()}")
            try:
                self.runner.run_and_capture(command)
            except SubprocessFailure as e:
                raise InstallationFailure(
                    f"gem install failed: {e}",
                    output=e.output
                ) from e
