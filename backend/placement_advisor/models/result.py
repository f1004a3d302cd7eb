"""
Result Models - Typed outcomes for operations that call remote services.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Failure categories for remote calls."""
    NETWORK = "network"  # request never got a response
    REJECTED = "rejected"  # remote service answered with an error status
    INVALID_RESPONSE = "invalid_response"  # response could not be understood
    COMPLETION = "completion"  # generative service failed


@dataclass(frozen=True)
class Failure:
    """Why a remote call failed. message is user-presentable when set."""
    kind: ErrorKind
    message: Optional[str] = None


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or a Failure, never both."""
    value: Optional[T] = None
    error: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: Optional[str] = None) -> "Result[T]":
        return cls(error=Failure(kind=kind, message=message))
