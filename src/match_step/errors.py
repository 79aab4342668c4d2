"""Error hierarchy for the match step."""

from typing import List, Optional, Sequence


class MatchStepError(Exception):
    """Base class for every failure the step reports."""
    pass


class ConfigurationError(MatchStepError):
    """A single configuration rule was violated."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class MissingRequiredField(ConfigurationError):
    """A required input was empty."""

    def __init__(self, field: str):
        super().__init__(field, "required variable is not present")


class InvalidEnumValue(ConfigurationError):
    """An input was not one of its allowed values."""

    def __init__(self, field: str, value: str, allowed: Sequence[str]):
        self.value = value
        self.allowed = list(allowed)
        super().__init__(
            field,
            f"invalid value '{value}', available: {', '.join(self.allowed)}"
        )


class ConfigValidationError(MatchStepError):
    """Raised when one or more configuration rules fail."""

    def __init__(self, errors: List[ConfigurationError]):
        self.errors = list(errors)
        super().__init__("; ".join(str(e) for e in self.errors))


class OptionParseError(MatchStepError):
    """The free-form options string could not be split."""

    def __init__(self, options: str, reason: str):
        self.options = options
        super().__init__(f"failed to split options ({options}): {reason}")


class ResolutionError(MatchStepError):
    """Base class for failures while resolving the fastlane invocation."""
    pass


class InstallationFailure(ResolutionError):
    """A single gem install attempt failed."""

    def __init__(self, message: str, output: str = ""):
        self.output = output
        super().__init__(message)


class InstallationRetriesExhausted(InstallationFailure):
    """Every gem install attempt failed."""

    def __init__(self, gem: str, attempts: int, last_error: InstallationFailure):
        self.gem = gem
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"gem install {gem} failed after {attempts} attempts: {last_error}",
            output=last_error.output
        )


class DependencyInstallFailure(ResolutionError):
    """`bundle install` failed."""
    pass


class LockFileMissingAfterInstall(ResolutionError):
    """`bundle install` succeeded but produced no lock file."""

    def __init__(self, lockfile_path: str):
        self.lockfile_path = lockfile_path
        super().__init__(
            f"{lockfile_path} does not exist, even though 'bundle install' was called"
        )


class FilesystemAccessError(ResolutionError):
    """Wraps an OS error raised while probing or reading a file."""

    def __init__(self, path: str, error: OSError):
        self.path = path
        self.error = error
        super().__init__(f"failed to access {path}: {error}")


class SubprocessFailure(MatchStepError):
    """A command exited non-zero or could not be started."""

    def __init__(
        self,
        command: str,
        returncode: Optional[int] = None,
        output: str = "",
        reason: Optional[str] = None
    ):
        self.command = command
        self.returncode = returncode
        self.output = output
        if reason is None:
            reason = f"exit status {returncode}"
        message = f"command failed ({reason}): {command}"
        if output:
            message += f", output: {output}"
        super().__init__(message)
