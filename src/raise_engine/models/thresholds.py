"""Numeric thresholds used by the level and fast-track rules."""

from decimal import Decimal

from pydantic import BaseModel, Field


class RuleThresholds(BaseModel):
    """Monetary cut-offs; both bounds are inclusive on the triggering side."""

    services_escalation_min: Decimal = Field(
        default=Decimal("200000"),
        description="Low-risk services at or above this value escalate the level",
    )
    fast_track_max_raise_tcv: Decimal = Field(
        default=Decimal("250000"),
        description="Fast-track requires RAISE TCV strictly below this value",
    )
