"""Result types for railway-oriented programming.

Every workflow operation that can fail returns a Result instead of raising.
Callers pattern-match on the outcome, which keeps the failure paths of the
connection workflow explicit and testable.

Usage:
    result = await initiation_service.initiate(request)
    match result:
        case Success(value=intent):
            ...
        case Failure(error=error):
            ...
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Successful outcome.

    Attributes:
        value: The produced value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Failed outcome.

    Attributes:
        error: The error value (never an exception instance).
    """

    error: E


type Result[T, E] = Success[T] | Failure[E]
