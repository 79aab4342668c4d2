"""Tests for the resolution decision logic."""

import pytest
from match_step.errors import LockFileMissingAfterInstall
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


def walk(state, observations):
    """Drive next_action with canned observations until it resolves or fails."""
    actions = []
    for _ in range(20):
        action = next_action(state)
        actions.append(action)
        if isinstance(action, (Resolved, Failed)):
            return actions
        state = action.apply(state, observations[type(action)](state))
    raise AssertionError("plan did not terminate")


class TestExplicitVersion:
    """Test resolution when a fastlane version is requested."""

    def test_install_requested_version(self):
        action = next_action(ResolutionState(version_request="2.1.0"))
        assert action == InstallGem("fastlane", "2.1.0")

    def test_latest_has_no_constraint(self):
        action = next_action(ResolutionState(version_request="latest"))
        assert action == InstallGem("fastlane", "")

    def test_pinned_prefix_after_install(self):
        action = next_action(ResolutionState(version_request="2.1.0", gem_installed=True))
        assert isinstance(action, Resolved)
        assert action.invocation.command == ("fastlane", "_2.1.0_")
        assert action.invocation.workdir is None

    def test_latest_prefix_after_install(self):
        action = next_action(ResolutionState(version_request="latest", gem_installed=True))
        assert action.invocation.command == ("fastlane",)

    def test_version_wins_over_gemfile(self):
        action = next_action(ResolutionState(version_request="2.1.0", gemfile_path="/app/Gemfile"))
        assert isinstance(action, InstallGem)


class TestGemfileResolution:
    """Test resolution driven by a Gemfile."""

    def test_no_inputs_uses_system_fastlane(self):
        action = next_action(ResolutionState())
        assert isinstance(action, Resolved)
        assert action.invocation.command == ("fastlane",)

    def test_checks_gemfile_first(self):
        assert next_action(ResolutionState(gemfile_path="/app/Gemfile")) == CheckGemfile("/app/Gemfile")

    def test_missing_gemfile_uses_system_fastlane(self):
        action = next_action(ResolutionState(gemfile_path="/app/Gemfile", gemfile_exists=False))
        assert isinstance(action, Resolved)
        assert action.invocation.command == ("fastlane",)
        assert "Gemfile not exist" in action.message

    def test_lockfile_checked_next_to_gemfile(self):
        state = ResolutionState(gemfile_path="/app/Gemfile", gemfile_exists=True)
        assert next_action(state) == CheckLockfile("/app/Gemfile.lock")

    def test_missing_lockfile_runs_bundle_install(self):
        state = ResolutionState(gemfile_path="/app/Gemfile", gemfile_exists=True, lockfile_exists=False)
        action = next_action(state)
        assert isinstance(action, BundleInstall)
        assert action.workdir == "/app"

    def test_bundle_install_forces_lockfile_recheck(self):
        state = ResolutionState(gemfile_path="/app/Gemfile", gemfile_exists=True, lockfile_exists=False)
        state = next_action(state).apply(state)
        assert state.bundle_install_called
        assert state.lockfile_exists is None

    def test_lockfile_still_missing_after_install(self):
        state = ResolutionState(
            gemfile_path="/app/Gemfile",
            gemfile_exists=True,
            lockfile_exists=False,
            bundle_install_called=True
        )
        action = next_action(state)
        assert isinstance(action, Failed)
        assert isinstance(action.error, LockFileMissingAfterInstall)

    def test_reads_pin_from_lockfile(self):
        state = ResolutionState(gemfile_path="/app/Gemfile", gemfile_exists=True, lockfile_exists=True)
        assert next_action(state) == ReadPinnedVersion("fastlane", "/app/Gemfile.lock")

    def test_no_pin_uses_system_fastlane(self):
        state = ResolutionState(
            gemfile_path="/app/Gemfile", gemfile_exists=True, lockfile_exists=True, pinned_version=""
        )
        action = next_action(state)
        assert action.invocation.command == ("fastlane",)
        assert action.invocation.workdir is None

    def test_pin_runs_bundle_install_once(self):
        state = ResolutionState(
            gemfile_path="/app/Gemfile", gemfile_exists=True, lockfile_exists=True, pinned_version="2.220.0"
        )
        assert isinstance(next_action(state), BundleInstall)

        state = next_action(state).apply(state)
        assert state.lockfile_exists is True
        action = next_action(state)
        assert action.invocation.command == ("bundle", "exec", "fastlane")
        assert action.invocation.workdir == "/app"

    def test_relative_gemfile_workdir(self):
        state = ResolutionState(
            gemfile_path="Gemfile",
            gemfile_exists=True,
            lockfile_exists=True,
            pinned_version="2.220.0",
            bundle_install_called=True
        )
        assert next_action(state).invocation.workdir == "."


class TestFullWalk:
    """Walk whole plans with simulated observations."""

    def test_generated_lockfile_with_pin(self):
        """Test one bundle install when it creates a pinning lock file."""
        observations = {
            CheckGemfile: lambda s: True,
            CheckLockfile: lambda s: s.bundle_install_called,
            BundleInstall: lambda s: None,
            ReadPinnedVersion: lambda s: "9.9.9",
        }
        actions = walk(ResolutionState(gemfile_path="/app/Gemfile"), observations)

        assert sum(isinstance(a, BundleInstall) for a in actions) == 1
        assert actions[-1].invocation.command == ("bundle", "exec", "fastlane")
        assert actions[-1].invocation.workdir == "/app"

    @pytest.mark.parametrize("pin,expected_installs", [("", 0), ("2.0.0", 1)])
    def test_existing_lockfile(self, pin, expected_installs):
        observations = {
            CheckGemfile: lambda s: True,
            CheckLockfile: lambda s: True,
            BundleInstall: lambda s: None,
            ReadPinnedVersion: lambda s: pin,
        }
        actions = walk(ResolutionState(gemfile_path="/app/Gemfile"), observations)
        assert sum(isinstance(a, BundleInstall) for a in actions) == expected_installs
