"""
Result type returned by the draft services.

Rule violations (wrong turn, captain spots filled, unknown player number, ...)
are expected outcomes of user commands, so the services report them as a
failed Result instead of raising. The command layer decides how to word them.

Usage:
    result = draft_service.set_captain(guild_id, user_id)
    if not result:
        if result.error_code == error_codes.CAPTAIN_SPOTS_FILLED:
            blue = result.details["blue_captain_id"]
        ...
    assignment = result.value
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a service call.

    Attributes:
        success: True when the operation was applied
        value: Payload of a successful call (may be None)
        error: Human readable reason for a failure
        error_code: One of the constants in services.error_codes
        details: Extra data attached to a failure, e.g. the current captains
    """

    success: bool
    value: T | None = None
    error: str | None = None
    error_code: str | None = None
    details: dict[str, Any] | None = None

    @classmethod
    def ok(cls, value: T | None = None) -> "Result[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(
        cls, error: str, code: str | None = None, details: dict[str, Any] | None = None
    ) -> "Result[T]":
        return cls(success=False, error=error, error_code=code, details=details)

    def __bool__(self) -> bool:
        return self.success

    def unwrap(self) -> T:
        """Return the value, or raise ValueError carrying the failure message."""
        if not self.success:
            raise ValueError(f"Cannot unwrap failed result: {self.error}")
        return self.value  # type: ignore

    def unwrap_or(self, default: T) -> T:
        return self.value if self.success else default  # type: ignore

    def map(self, fn: Callable[[T], "Result"]) -> "Result":
        """Feed a successful value into the next step; failures pass through untouched."""
        if not self.success:
            return self
        return fn(self.value)
