"""Result types for railway-oriented programming.

Service-level operations that can fail return a Result instead of raising.
Controllers may also return a Result; the dispatcher unwraps Success values
and normalizes Failure errors into HTTP errors.

Usage:
    def parse_port(raw: str) -> Result[int, str]:
        if not raw.isdigit():
            return Failure(error="Port must be numeric")
        return Success(value=int(raw))

    match parse_port("8080"):
        case Success(value=port):
            print(f"Port: {port}")
        case Failure(error=error):
            print(f"Error: {error}")
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


# Type alias for Result union
Result: TypeAlias = Success[T] | Failure[E]
