"""Bounded retry helper."""

import logging
from typing import Callable, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_call(
    action: Callable[[int], T],
    max_attempts: int,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,)
) -> T:
    """
    Call ``action`` until it succeeds or ``max_attempts`` is reached.

    Args:
        action: Callable receiving the zero-based attempt number
        max_attempts: Total number of calls allowed
        retry_on: Exception types that trigger another attempt

    Returns:
        Whatever ``action`` returned on its first successful call

    Raises:
        The last exception raised by ``action`` once attempts are exhausted.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    for attempt in range(max_attempts):
        try:
            return action(attempt)
        except retry_on as e:
            if attempt + 1 >= max_attempts:
                raise
            logger.warning(f"Attempt {attempt + 1} failed, retrying: {e}")

    raise AssertionError("unreachable")
