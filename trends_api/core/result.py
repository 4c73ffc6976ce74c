"""Result types for railway-oriented programming.

Operations that can fail for a business reason return a Result instead of
raising. Callers pattern-match on the outcome.

Usage:
    result = controller.reset("ip:203.0.113.7")
    match result:
        case Success():
            logger.info("Bucket refilled")
        case Failure(error=err):
            logger.warning("Reset failed", error_code=err.code.value)
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


Result: TypeAlias = Success[T] | Failure[E]
