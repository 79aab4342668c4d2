"""Data models for the match step."""

from enum import Enum
from typing import Optional, Tuple
from pydantic import BaseModel, ConfigDict, field_validator


class ProfileType(str, Enum):
    """Provisioning profile types accepted by match."""
    ADHOC = "adhoc"
    APPSTORE = "appstore"
    DEVELOPMENT = "development"
    ENTERPRISE = "enterprise"


class RubyInstallType(str, Enum):
    """How the active Ruby was installed."""
    SYSTEM = "system"
    BREW = "brew"
    RVM = "rvm"
    RBENV = "rbenv"
    UNKNOWN = "unknown"


class LockEntry(BaseModel):
    """A gem pinned in a Gemfile.lock specs block."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str


class ResolvedInvocation(BaseModel):
    """How to call fastlane, and where."""

    model_config = ConfigDict(frozen=True)

    command: Tuple[str, ...]
    workdir: Optional[str] = None

    @field_validator("command")
    @classmethod
    def _command_not_empty(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value or not value[0]:
            raise ValueError("command prefix must start with an executable")
        return value

    @property
    def uses_bundler(self) -> bool:
        return self.workdir is not None

    def with_args(self, *args: str) -> Tuple[str, ...]:
        return self.command + tuple(args)
