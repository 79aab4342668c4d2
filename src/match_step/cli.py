# Copyright (c) 2025 match-step Project
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""CLI interface for the fastlane match step."""

import logging
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from match_step import __version__
from match_step.commands import CommandRunner
from match_step.config import StepConfig
from match_step.errors import (
    ConfigValidationError,
    MatchStepError,
    OptionParseError,
    ResolutionError,
    SubprocessFailure,
)
from match_step.resolver import ToolResolver
from match_step.step import MatchStep
from match_step.validation import validate_config

app = typer.Typer(
    name="match-step",
    help="Run fastlane match in read-only mode for CI",
    rich_markup_mode="markdown"
)
console = Console()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)]
)
logger = logging.getLogger(__name__)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"match-step version {__version__}")
        raise typer.Exit()


def fail(message: str) -> NoReturn:
    """Log a fatal error and exit non-zero."""
    logger.error(message)
    raise typer.Exit(1)


def _set_log_level(debug: bool) -> None:
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.INFO)


def print_config(config: StepConfig) -> None:
    console.print()
    console.print("[bold blue]Configs:[/bold blue]")
    for label, value in config.describe():
        console.print(f"- {label}: {value}", markup=False, highlight=False, soft_wrap=True)


def build_runner() -> CommandRunner:
    return CommandRunner()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True
    )
) -> None:
    """match-step - fastlane match for CI pipelines."""
    pass


@app.command()
def run(
    debug: bool = typer.Option(False, "--debug", "-d", help="Debug logging")
) -> None:
    """
    Install or locate fastlane and run match in read-only mode.

    Inputs are read from the environment: git_url, git_branch, app_id,
    decrypt_password, type, team_id, options, gemfile_path, fastlane_version.
    """
    _set_log_level(debug)

    config = StepConfig.from_env()
    print_config(config)

    try:
        validate_config(config)
    except ConfigValidationError as e:
        for error in e.errors:
            logger.error(f"Issue with input: {error}")
        raise typer.Exit(1)

    console.print()
    console.print("[bold blue]Setup[/bold blue]")

    step = MatchStep(config, runner=build_runner())
    try:
        elapsed = step.setup()
    except ResolutionError as e:
        fail(f"Failed to ensure fastlane version, error: {e}")
    except SubprocessFailure as e:
        fail(f"Failed to print fastlane version, error: {e}")

    logger.info(f"Setup took {elapsed:f} seconds to complete")

    console.print()
    console.print("[bold blue]Running Match[/bold blue]")

    try:
        step.run_match()
    except OptionParseError as e:
        fail(f"Failed to parse options, error: {e}")
    except MatchStepError as e:
        fail(f"Download or installation failed, error: {e}")

    console.print("[green]Success[/green]")


@app.command()
def resolve(
    fastlane_version: Optional[str] = typer.Option(
        None, "--fastlane-version", help="Explicit fastlane version or 'latest' (default: $fastlane_version)"
    ),
    gemfile_path: Optional[str] = typer.Option(
        None, "--gemfile", help="Path to the Gemfile (default: $gemfile_path)"
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Debug logging")
) -> None:
    """Resolve how fastlane would be invoked and print it."""
    _set_log_level(debug)

    config = StepConfig.from_env()
    if fastlane_version is None:
        fastlane_version = config.fastlane_version
    if gemfile_path is None:
        gemfile_path = config.gemfile_path

    resolver = ToolResolver(build_runner())
    try:
        invocation = resolver.resolve(fastlane_version, gemfile_path)
    except ResolutionError as e:
        fail(f"Failed to ensure fastlane version, error: {e}")

    console.print(f"Command: {' '.join(invocation.command)}", markup=False, highlight=False, soft_wrap=True)
    if invocation.uses_bundler:
        console.print(f"Working directory: {invocation.workdir}", markup=False, highlight=False, soft_wrap=True)
