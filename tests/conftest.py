"""Pytest configuration and shared fixtures."""

import sys
import pytest
from pathlib import Path

# Add the src directory to Python path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from match_step.commands import Command
from match_step.errors import SubprocessFailure


STEP_ENV_VARS = [
    "git_url", "git_branch", "app_id", "decrypt_password", "type",
    "team_id", "options", "gemfile_path", "fastlane_version",
]


class RecordingRunner:
    """CommandRunner stand-in that records commands instead of running them."""

    def __init__(self, fail_on=None, on_run=None):
        self.commands = []
        self.fail_on = fail_on or (lambda command: False)
        self.on_run = on_run

    def _record(self, command: Command) -> None:
        self.commands.append(command)
        if self.on_run:
            self.on_run(command)
        if self.fail_on(command):
            raise SubprocessFailure(command.printable(), returncode=1, output="boom")

    def run(self, command: Command) -> None:
        self._record(command)

    def run_and_capture(self, command: Command) -> str:
        self._record(command)
        return ""

    @property
    def argv(self):
        return [list(c.args) for c in self.commands]


@pytest.fixture
def runner():
    """Create a recording command runner."""
    return RecordingRunner()


@pytest.fixture
def make_runner():
    """Factory for recording runners with failure or side-effect hooks."""
    return RecordingRunner


@pytest.fixture
def gemfile(tmp_path):
    """Create a Gemfile without a lock file."""
    gemfile = tmp_path / "Gemfile"
    gemfile.write_text('source "https://rubygems.org"\n\ngem "fastlane"\n')
    return gemfile


@pytest.fixture
def gemfile_lock_content():
    """Gemfile.lock content pinning fastlane."""
    return """GEM
  remote: https://rubygems.org/
  specs:
    CFPropertyList (3.0.6)
    fastlane (2.220.0)
      CFPropertyList (>= 2.3, < 4.0.0)
    xcpretty (0.3.0)

PLATFORMS
  ruby

DEPENDENCIES
  fastlane

BUNDLED WITH
   2.4.10
"""


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch):
    """Clear step inputs for each test."""
    for name in STEP_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("MATCH_PASSWORD", raising=False)
