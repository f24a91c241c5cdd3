"""Outcome of handling one webhook event."""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")

USER_ERROR = "user_error"
UNKNOWN_ERROR = "unknown"


@dataclass(frozen=True)
class Result(Generic[T]):
    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str, code: str = UNKNOWN_ERROR) -> "Result[T]":
        return cls(ok=False, error=error, error_code=code)

    def forward(self) -> "Result[Any]":
        """This failure, for a caller that returns a different value type."""
        if self.ok:
            raise ValueError("Only failures can be forwarded")
        return Result.failure(self.error, self.error_code)

    def unwrap_or(self, default: T) -> T:
        return self.value if self.ok else default
