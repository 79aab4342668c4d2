"""fastlane version resolution."""

from match_step.models import ResolvedInvocation
from .executor import ToolResolver, path_exists
from .plan import ResolutionState, next_action

__all__ = [
    "ResolvedInvocation",
    "ToolResolver",
    "ResolutionState",
    "next_action",
    "path_exists"
]
