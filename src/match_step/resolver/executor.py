"""Performs the side effects chosen by the resolution plan."""

import logging
from pathlib import Path
from typing import Callable, Optional

from match_step.commands import Command, CommandRunner
from match_step.config import settings
from match_step.errors import (
    DependencyInstallFailure,
    FilesystemAccessError,
    InstallationFailure,
    InstallationRetriesExhausted,
    ResolutionError,
    SubprocessFailure,
)
from match_step.lockfile import gem_version_from_lock
from match_step.models import ResolvedInvocation
from match_step.resolver.plan import (
    BundleInstall,
    CheckGemfile,
    CheckLockfile,
    Failed,
    InstallGem,
    ReadPinnedVersion,
    ResolutionState,
    Resolved,
    next_action,
)
from match_step.retry import retry_call
from match_step.ruby import GemInstaller

logger = logging.getLogger(__name__)

# Upper bound on plan steps; the longest path takes seven
MAX_STEPS = 16


def path_exists(path: str) -> bool:
    try:
        Path(path).stat()
    except FileNotFoundError:
        return False
    except NotADirectoryError:
        return False
    except OSError as e:
        raise FilesystemAccessError(path, e) from e
    return True


class ToolResolver:
    """Decides how fastlane is invoked, installing what is needed on the way."""

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        installer: Optional[GemInstaller] = None,
        exists: Callable[[str], bool] = path_exists,
        install_retries: int = settings.install_retries
    ):
        self.runner = runner or CommandRunner()
        self.installer = installer or GemInstaller(self.runner)
        self.exists = exists
        self.install_retries = install_retries

    def resolve(self, version_request: str = "", gemfile_path: str = "") -> ResolvedInvocation:
        """
        Resolve the fastlane command prefix and working directory.

        Args:
            version_request: Explicit fastlane version, ``latest`` or empty
            gemfile_path: Optional path to the project's Gemfile

        Returns:
            The resolved invocation

        Raises:
            ResolutionError: installation, bundler or filesystem failures
        """
        state = ResolutionState(version_request=version_request, gemfile_path=gemfile_path)

        for _ in range(MAX_STEPS):
            action = next_action(state)

            if isinstance(action, Resolved):
                logger.info(action.message)
                return action.invocation
            if isinstance(action, Failed):
                raise action.error

            logger.info(action.message)
            state = action.apply(state, self._perform(action))

        raise ResolutionError(f"resolution did not finish within {MAX_STEPS} steps")

    def _perform(self, action):
        if isinstance(action, InstallGem):
            return self._install_gem(action)
        if isinstance(action, (CheckGemfile, CheckLockfile)):
            return self.exists(action.path)
        if isinstance(action, BundleInstall):
            return self._bundle_install(action)
        if isinstance(action, ReadPinnedVersion):
            return gem_version_from_lock(action.gem, Path(action.lockfile_path))
        raise TypeError(f"unknown resolution action: {action!r}")

    def _install_gem(self, action: InstallGem) -> None:
        attempts = self.install_retries + 1
        try:
            retry_call(
                lambda attempt: self.installer.install(action.gem, action.version),
                max_attempts=attempts,
                retry_on=(InstallationFailure,)
            )
        except InstallationFailure as e:
            raise InstallationRetriesExhausted(action.gem, attempts, e) from e

    def _bundle_install(self, action: BundleInstall) -> None:
        command = Command.of(settings.dependency_manager, "install", cwd=action.workdir)
        logger.info(f"$ {command.printable()}")
        try:
            self.runner.run(command)
        except SubprocessFailure as e:
            raise DependencyInstallFailure(f"bundle install failed in {action.workdir}: {e}") from e
