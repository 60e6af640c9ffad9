"""Opportunity validation for the layer that feeds the engine."""

from decimal import Decimal
from typing import Any, Optional

from pydantic import ValidationError

from raise_engine.models.opportunity import Opportunity

MAX_MONETARY_VALUE = Decimal("1000000000")


def opportunity_errors(opp: Opportunity) -> list[str]:
    """Business-rule problems with an already parsed opportunity; empty if valid."""
    errors: list[str] = []
    for label, value in (("tcv", opp.tcv), ("raiseTcv", opp.raise_tcv)):
        if value < 0:
            errors.append(f"{label}: must not be negative")
        elif value > MAX_MONETARY_VALUE:
            errors.append(f"{label}: exceeds maximum {MAX_MONETARY_VALUE}")
    if opp.raise_tcv < opp.tcv:
        errors.append("raiseTcv: must be greater than or equal to tcv")
    if opp.services_value is not None and opp.services_value < 0:
        errors.append("servicesValue: must not be negative")
    for label, value in (
        ("marginPercent", opp.margin_percent),
        ("firstMarginPercent", opp.first_margin_percent),
    ):
        if value is not None and not (0 <= value <= 100):
            errors.append(f"{label}: must be between 0 and 100")
    return errors


def validate_opportunity(data: Any) -> tuple[Optional[Opportunity], list[str]]:
    """
    Parse and check a raw record. Returns (opportunity, []) when valid,
    (None, errors) otherwise.
    """
    try:
        opp = Opportunity.model_validate(data)
    except ValidationError as e:
        return None, [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        ]
    errors = opportunity_errors(opp)
    if errors:
        return None, errors
    return opp, []
