"""Authorization matrix: TCV thresholds mapped to RAISE levels."""

import logging
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from raise_engine.models.opportunity import CamelModel, RaiseLevel

logger = logging.getLogger(__name__)


class AuthorizationLevel(CamelModel):
    """One row of the matrix. A value belongs here when tcv_min <= value < next tcv_min."""

    level: RaiseLevel
    tcv_min: Decimal = Field(..., description="Inclusive lower bound")
    tcv_max: Optional[Decimal] = Field(default=None, description="Display only; None is unbounded")
    tcv_label: str = ""
    authorizers_atp: str = ""
    authorizers_ats_atc_hnd: str = ""
    workflow_type: str = "Classic"  # Classic | Simplified | FastTrack
    notes: Optional[str] = None


class AuthorizationMatrix(CamelModel):
    """Configured matrix. Levels are kept sorted by tcv_min, highest first."""

    id: str = "default"
    name: str = ""
    is_active: bool = True
    levels: list[AuthorizationLevel] = Field(default_factory=list)

    @field_validator("levels")
    @classmethod
    def _sort_descending(cls, levels: list[AuthorizationLevel]) -> list[AuthorizationLevel]:
        ordered = sorted(levels, key=lambda entry: entry.tcv_min, reverse=True)
        for upper, lower in zip(ordered, ordered[1:]):
            if upper.tcv_min == lower.tcv_min:
                logger.warning(
                    "Authorization matrix has duplicate bound %s (%s, %s); first entry wins",
                    upper.tcv_min,
                    upper.level.value,
                    lower.level.value,
                )
        return ordered

    def level_for_value(self, value: Decimal | int | float) -> RaiseLevel:
        """
        Base level for a RAISE TCV: first entry (highest bound first) whose
        lower bound is <= value.
        """
        amount = Decimal(str(value))
        for entry in self.levels:
            if amount >= entry.tcv_min:
                return entry.level

        # Empty matrix, or a value below every bound (e.g. negative)
        fallback = RaiseLevel.most_severe()
        logger.warning(
            "No authorization matrix entry matches %s in '%s'; falling back to %s",
            amount,
            self.name or self.id,
            fallback.value,
        )
        return fallback

    def info_for(self, level: RaiseLevel) -> Optional[AuthorizationLevel]:
        """Matrix row for a level (authorizers, workflow type), if configured."""
        for entry in self.levels:
            if entry.level == level:
                return entry
        return None


_CLASSIC_NOTES = (
    "Classic: approvals in meeting, with group-level authorizers for every "
    "legal entity and Expert involvement"
)
_SIMPLIFIED_NOTES = (
    "Simplified: approvals by e-mail (unless a meeting is requested), no "
    "Expert involvement unless there are KCP deviations"
)

DEFAULT_AUTHORIZATION_MATRIX = AuthorizationMatrix(
    id="default",
    name="PSQ-003 v17 Default",
    levels=[
        AuthorizationLevel(
            level=RaiseLevel.L1,
            tcv_min=Decimal("20000001"),
            tcv_label="> 20 M€",
            authorizers_atp="CEO + COO",
            authorizers_ats_atc_hnd="CEO + COO",
            workflow_type="Classic",
            notes=_CLASSIC_NOTES,
        ),
        AuthorizationLevel(
            level=RaiseLevel.L2,
            tcv_min=Decimal("10000000"),
            tcv_max=Decimal("20000000"),
            tcv_label="10-20 M€",
            authorizers_atp="Industry Head + COO + CDO",
            authorizers_ats_atc_hnd="Industry Head + COO + CDO + CDE",
            workflow_type="Classic",
            notes=_CLASSIC_NOTES,
        ),
        AuthorizationLevel(
            level=RaiseLevel.L3,
            tcv_min=Decimal("1000000"),
            tcv_max=Decimal("10000000"),
            tcv_label="1-10 M€",
            authorizers_atp="Industry Head",
            authorizers_ats_atc_hnd=(
                "Industry Head + Capability Leader(s) + Industry Operation Leader + CDE"
            ),
            workflow_type="Classic",
            notes=_CLASSIC_NOTES,
        ),
        AuthorizationLevel(
            level=RaiseLevel.L4,
            tcv_min=Decimal("500000"),
            tcv_max=Decimal("1000000"),
            tcv_label="500K-1M€",
            authorizers_atp="Industry Head",
            authorizers_ats_atc_hnd=(
                "[sub] Industry Head + Capability Leader(s) + [sub] Industry Operation Leader + CDE"
            ),
            workflow_type="Simplified",
            notes=_SIMPLIFIED_NOTES,
        ),
        AuthorizationLevel(
            level=RaiseLevel.L5,
            tcv_min=Decimal("250000"),
            tcv_max=Decimal("500000"),
            tcv_label="250-500 K€",
            authorizers_atp="Industry Head",
            authorizers_ats_atc_hnd="Sales Manager + Practice/CoE Leader(s) + CDE",
            workflow_type="Simplified",
            notes=_SIMPLIFIED_NOTES,
        ),
        AuthorizationLevel(
            level=RaiseLevel.L6,
            tcv_min=Decimal("0"),
            tcv_max=Decimal("250000"),
            tcv_label="0-250 K€",
            authorizers_atp="n.a.",
            authorizers_ats_atc_hnd="Client Executive / Manager / Sales Specialist",
            workflow_type="FastTrack",
            notes="Fast Track (with tracking) if there are no KCP deviations",
        ),
    ],
)
