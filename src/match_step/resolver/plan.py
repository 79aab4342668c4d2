"""
Decision logic for choosing how fastlane is invoked.

``next_action`` looks at what is known so far about the requested version,
the Gemfile and its lock file, and returns the next thing to do. Actions
that need the outside world (installing, probing files, reading the lock
file) carry an ``apply`` method that folds their outcome back into a new
state, so the whole decision tree can be walked without running anything.
"""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Union

from match_step.config import settings
from match_step.errors import LockFileMissingAfterInstall, ResolutionError
from match_step.lockfile import lockfile_path_for
from match_step.models import ResolvedInvocation


@dataclass(frozen=True)
class ResolutionState:
    """Facts gathered while resolving; ``None`` means not checked yet."""
    version_request: str = ""
    gemfile_path: str = ""
    gem_installed: bool = False
    gemfile_exists: Optional[bool] = None
    lockfile_exists: Optional[bool] = None
    pinned_version: Optional[str] = None
    bundle_install_called: bool = False

    @property
    def gemfile_dir(self) -> str:
        return str(Path(self.gemfile_path).parent)

    @property
    def lockfile_path(self) -> str:
        return str(lockfile_path_for(self.gemfile_path))


@dataclass(frozen=True)
class InstallGem:
    gem: str
    version: str

    @property
    def message(self) -> str:
        return f"fastlane version defined: {self.version or settings.latest_version}, installing..."

    def apply(self, state: ResolutionState, result: None = None) -> ResolutionState:
        return replace(state, gem_installed=True)


@dataclass(frozen=True)
class CheckGemfile:
    path: str

    @property
    def message(self) -> str:
        return f"Checking Gemfile at: {self.path}"

    def apply(self, state: ResolutionState, result: bool) -> ResolutionState:
        return replace(state, gemfile_exists=result)


@dataclass(frozen=True)
class CheckLockfile:
    path: str

    @property
    def message(self) -> str:
        return f"Gemfile exists, checking fastlane version from {self.path}"

    def apply(self, state: ResolutionState, result: bool) -> ResolutionState:
        return replace(state, lockfile_exists=result)


@dataclass(frozen=True)
class BundleInstall:
    workdir: str
    reason: str

    @property
    def message(self) -> str:
        return f"{self.reason}, running 'bundle install' ..."

    def apply(self, state: ResolutionState, result: None = None) -> ResolutionState:
        # A missing lock file must be probed again after the install
        lockfile_exists = None if state.lockfile_exists is False else state.lockfile_exists
        return replace(state, bundle_install_called=True, lockfile_exists=lockfile_exists)


@dataclass(frozen=True)
class ReadPinnedVersion:
    gem: str
    lockfile_path: str

    @property
    def message(self) -> str:
        return f"Reading {self.gem} version from {self.lockfile_path}"

    def apply(self, state: ResolutionState, result: str) -> ResolutionState:
        return replace(state, pinned_version=result)


@dataclass(frozen=True)
class Resolved:
    invocation: ResolvedInvocation
    message: str


@dataclass(frozen=True)
class Failed:
    error: ResolutionError

    @property
    def message(self) -> str:
        return str(self.error)


Action = Union[InstallGem, CheckGemfile, CheckLockfile, BundleInstall, ReadPinnedVersion, Resolved, Failed]


def system_tool(message: str) -> Resolved:
    return Resolved(ResolvedInvocation(command=(settings.tool,)), message)


def next_action(state: ResolutionState) -> Action:
    """Return the next step of the resolution for ``state``."""
    if state.version_request:
        version = state.version_request
        if version == settings.latest_version:
            version = ""

        if not state.gem_installed:
            return InstallGem(settings.tool, version)

        command = (settings.tool,)
        if version:
            command += (f"_{version}_",)
        return Resolved(
            ResolvedInvocation(command=command),
            f"using installed fastlane {version or settings.latest_version}"
        )

    if not state.gemfile_path:
        return system_tool("no fastlane version nor Gemfile path defined, using system installed fastlane...")

    if state.gemfile_exists is None:
        return CheckGemfile(state.gemfile_path)
    if not state.gemfile_exists:
        return system_tool(
            f"Gemfile not exist at: {state.gemfile_path} and no fastlane version defined, "
            "using system installed fastlane..."
        )

    if state.lockfile_exists is None:
        return CheckLockfile(state.lockfile_path)
    if not state.lockfile_exists:
        if state.bundle_install_called:
            return Failed(LockFileMissingAfterInstall(state.lockfile_path))
        return BundleInstall(state.gemfile_dir, f"Gemfile.lock not exist at: {state.lockfile_path}")

    if state.pinned_version is None:
        return ReadPinnedVersion(settings.tool, state.lockfile_path)
    if not state.pinned_version:
        return system_tool("fastlane version not found in Gemfile.lock, using system installed fastlane...")

    if not state.bundle_install_called:
        return BundleInstall(
            state.gemfile_dir,
            f"fastlane version defined in Gemfile.lock: {state.pinned_version}"
        )

    return Resolved(
        ResolvedInvocation(
            command=(settings.dependency_manager, "exec", settings.tool),
            workdir=state.gemfile_dir
        ),
        f"fastlane version defined in Gemfile.lock: {state.pinned_version}, "
        "using bundler to call fastlane commands..."
    )
