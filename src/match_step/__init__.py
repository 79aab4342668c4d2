"""
match-step - fastlane match runner for CI pipelines
"""

from .config import StepConfig, settings
from .resolver import ResolvedInvocation, ToolResolver

__version__ = "1.0.0"

__all__ = [
    "StepConfig",
    "settings",
    "ResolvedInvocation",
    "ToolResolver",
]
