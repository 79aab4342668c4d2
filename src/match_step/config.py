"""Configuration for the match step."""

import os
from typing import Iterator, Mapping, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field


def secure_input(value: str) -> str:
    """Mask a secret for display."""
    if value:
        return "***"
    return ""


class ToolSettings(BaseModel):
    """Fixed names used to install and invoke fastlane."""

    model_config = ConfigDict(frozen=True)

    tool: str = "fastlane"
    subcommand: str = "match"
    dependency_manager: str = "bundle"
    lockfile_name: str = "Gemfile.lock"
    password_env: str = "MATCH_PASSWORD"
    latest_version: str = "latest"

    # Retries after the first failed gem install
    install_retries: int = 2


class StepConfig(BaseModel):
    """Step inputs, read once from the environment."""

    model_config = ConfigDict(frozen=True)

    git_url: str = ""
    git_branch: str = ""
    app_id: str = ""
    decrypt_password: str = Field(default="", repr=False)
    type: str = ""
    team_id: str = ""

    options: str = ""
    gemfile_path: str = ""
    fastlane_version: str = ""

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "StepConfig":
        """Build the configuration from environment variables named after the fields."""
        if environ is None:
            environ = os.environ
        return cls(**{name: environ.get(name, "") for name in cls.model_fields})

    def describe(self) -> Iterator[Tuple[str, str]]:
        """Yield display rows with the passphrase masked."""
        yield "GitURL", self.git_url
        yield "GitBranch", self.git_branch
        yield "AppID", self.app_id
        yield "DecryptPassword", secure_input(self.decrypt_password)
        yield "Type", self.type
        yield "TeamID", self.team_id
        yield "Options", self.options
        yield "GemfilePath", self.gemfile_path
        yield "FastlaneVersion", self.fastlane_version


settings = ToolSettings()
