"""Errors raised by the payroll rule and aggregation engine.

Every error is scoped to the operation that raised it and surfaces to the
caller unchanged; the engine does not retry or recover.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from studio_payroll.months import Month


class PayrollError(Exception):
    """Base class for engine errors."""

    code = "PAYROLL_ERROR"


class RuleNotFoundError(PayrollError):
    """Raised when no rule exists for a month that cannot be synthesized."""

    code = "RULE_NOT_FOUND"

    def __init__(self, month: Month):
        self.month = month
        super().__init__(f"No payroll rule for {month}")


class RuleLockedError(PayrollError):
    """Raised when a rule edit is attempted outside the edit window."""

    code = "RULE_LOCKED"

    def __init__(self, month: Month, reason: str | None = None):
        self.month = month
        self.reason = reason
        msg = f"Payroll rule for {month} is not editable"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class InvalidRateError(PayrollError):
    """Raised when a monetary rule field is negative or not a finite number."""

    code = "INVALID_RATE"

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(
            f"Invalid value for {field}: {value!r} (must be a finite amount >= 0 in whole cents)"
        )


class NoInstructorsError(PayrollError):
    """Raised when the instructor roster is empty at calculation time."""

    code = "NO_INSTRUCTORS"

    def __init__(self, month: Month):
        self.month = month
        super().__init__(f"No instructors to calculate payroll for {month}")


class StoreFailureError(PayrollError):
    """Wraps an underlying persistence error without interpreting it."""

    code = "STORE_FAILURE"

    def __init__(self, operation: str, cause: BaseException):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Store operation '{operation}' failed: {cause}")


class InstructorNotFoundError(PayrollError):
    """Raised when a record names an instructor missing from the roster."""

    code = "INSTRUCTOR_NOT_FOUND"

    def __init__(self, instructor_id: str):
        self.instructor_id = instructor_id
        super().__init__(f"No instructor with id {instructor_id!r}")


class DuplicateInstructorError(PayrollError):
    """Raised when adding an instructor whose id is already on the roster."""

    code = "DUPLICATE_INSTRUCTOR"

    def __init__(self, instructor_id: str):
        self.instructor_id = instructor_id
        super().__init__(f"Instructor {instructor_id!r} already exists")


class InvalidRecordError(PayrollError):
    """Raised when an attendance or sales record carries an impossible value."""

    code = "INVALID_RECORD"

    def __init__(self, field: str, value: Any, requirement: str):
        self.field = field
        self.value = value
        super().__init__(f"Invalid value for {field}: {value!r} ({requirement})")
