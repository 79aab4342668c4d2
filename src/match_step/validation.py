"""Input validation for the match step."""

from typing import List

from match_step.config import StepConfig
from match_step.errors import (
    ConfigurationError,
    ConfigValidationError,
    InvalidEnumValue,
    MissingRequiredField,
)
from match_step.models import ProfileType


REQUIRED_FIELDS = ["git_url", "app_id", "decrypt_password"]


def collect_errors(config: StepConfig) -> List[ConfigurationError]:
    """Check every rule and return all violations in field order."""
    errors: List[ConfigurationError] = []

    for field in REQUIRED_FIELDS:
        if not getattr(config, field):
            errors.append(MissingRequiredField(field))

    allowed = [t.value for t in ProfileType]
    if config.type not in allowed:
        errors.append(InvalidEnumValue("type", config.type, allowed))

    return errors


def validate_config(config: StepConfig) -> None:
    """Raise ConfigValidationError if any rule fails."""
    errors = collect_errors(config)
    if errors:
        raise ConfigValidationError(errors)
