"""
Custom exceptions for retireplan.

Purpose
-------
Provides a unified exception hierarchy for consistent error handling
across the projection engine, the CLI and the HTTP layer. All exceptions
inherit from RetirePlanError, enabling catch-all handling when needed.

Exception Hierarchy
-------------------
RetirePlanError (base)
├── ValidationError - Input rejected before any numeric stage runs
│   ├── SchemaValidationError - Missing field, wrong type, out of bounds
│   └── CrossFieldConstraintError - Inconsistent field combinations
└── ComputationError - Unexpected failure inside the numeric stages

Usage
-----
>>> from retireplan.exceptions import SchemaValidationError, RetirePlanError
>>>
>>> try:
...     analysis = calculate_retirement(raw_payload)
... except SchemaValidationError as e:
...     print(e.details)
... except RetirePlanError as e:
...     print(f"retireplan error: {e}")
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class RetirePlanError(Exception):
    """
    Base exception for all retireplan errors.

    Examples
    --------
    >>> try:
    ...     calculate_retirement(payload)
    ... except RetirePlanError as e:
    ...     logger.error("calculation.failed", error=str(e))
    """

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        """Serialize as the ``{error, details}`` body returned to callers."""
        body: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(RetirePlanError):
    """
    Input validation failures.

    Always recoverable by the caller: fix the input and resend.
    """
    pass


class SchemaValidationError(ValidationError):
    """
    A field is missing, of the wrong type, or outside its bounds.

    ``details`` is a list of ``{"field", "message", "type"}`` dicts, one
    per offending field.

    Examples
    --------
    >>> raise SchemaValidationError(
    ...     "Invalid request data",
    ...     details=[{"field": "currentAge", "message": "...", "type": "greater_than_equal"}],
    ... )
    """

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message, details or [])

    @property
    def fields(self) -> List[str]:
        return [d["field"] for d in self.details]


class CrossFieldConstraintError(ValidationError):
    """
    Individually valid fields that are inconsistent with each other.

    Examples
    --------
    >>> raise CrossFieldConstraintError(
    ...     "Retirement age must be greater than current age",
    ...     details={"currentAge": 50, "retirementAge": 40},
    ... )
    """
    pass


class ComputationError(RetirePlanError):
    """
    Unexpected failure inside the numeric stages.

    Should not happen for validated input. Raised at the engine boundary
    with the underlying error message in ``details`` and the original
    exception chained as ``__cause__``.
    """
    pass
