"""Input validation for retireplan.

Turns a raw key/value payload into a frozen ``FinancialProfile`` or raises
one of the ``ValidationError`` subclasses. Nothing here touches the numeric
stages; a payload that fails validation never reaches them.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

import pydantic

from .config import FinancialProfile
from .exceptions import CrossFieldConstraintError, SchemaValidationError

__all__ = ["validate_profile", "schema_error_details"]


def schema_error_details(exc: pydantic.ValidationError) -> List[Dict[str, Any]]:
    """Flatten a pydantic error into ``{field, message, type}`` entries."""
    details = []
    for err in exc.errors(include_url=False):
        field = ".".join(str(part) for part in err["loc"]) or "__root__"
        details.append({"field": field, "message": err["msg"], "type": err["type"]})
    return details


def validate_profile(raw: Any) -> FinancialProfile:
    """
    Validate and normalize a raw financial profile.

    Parameters
    ----------
    raw : Mapping or FinancialProfile
        Request payload with camelCase (or snake_case) keys. A profile that
        is already validated is re-checked for cross-field rules only.

    Returns
    -------
    FinancialProfile
        Fully typed profile; ``life_expectancy`` defaults to 90.

    Raises
    ------
    SchemaValidationError
        Payload is not an object, or a field is missing, not a number,
        or out of bounds.
    CrossFieldConstraintError
        ``retirementAge <= currentAge`` or ``lifeExpectancy < retirementAge``.
    """
    if isinstance(raw, FinancialProfile):
        profile = raw
    else:
        if not isinstance(raw, Mapping):
            raise SchemaValidationError(
                "Invalid request data",
                details=[{
                    "field": "__root__",
                    "message": f"Expected a JSON object, got {type(raw).__name__}",
                    "type": "model_type",
                }],
            )
        try:
            profile = FinancialProfile.model_validate(dict(raw))
        except pydantic.ValidationError as e:
            raise SchemaValidationError(
                "Invalid request data", details=schema_error_details(e)
            ) from e

    if profile.retirement_age <= profile.current_age:
        raise CrossFieldConstraintError(
            "Retirement age must be greater than current age",
            details={
                "currentAge": profile.current_age,
                "retirementAge": profile.retirement_age,
            },
        )
    if profile.life_expectancy < profile.retirement_age:
        raise CrossFieldConstraintError(
            "Life expectancy must not be less than retirement age",
            details={
                "retirementAge": profile.retirement_age,
                "lifeExpectancy": profile.life_expectancy,
            },
        )
    return profile
