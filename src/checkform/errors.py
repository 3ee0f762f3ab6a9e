"""Check error types."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from checkform.result import CheckResult


class MalformedCheckError(ValueError):
    """Raised when a check string matches none of the recognised shapes."""

    def __init__(self, check: str, reason: str) -> None:
        self.check = check
        self.reason = reason
        super().__init__(f"Malformed check {check!r}: {reason}")


class CheckFailedError(AssertionError):
    """AssertionError with attached CheckResult.

    The error text is the diagnostic message itself so test runners print it
    unchanged.
    """

    def __init__(self, result: CheckResult) -> None:
        self.result = result
        super().__init__(result.message or f"Check {result.check!r} failed")
