"""Opportunity record and the enumerations the engine reasons about."""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class RaiseLevel(str, Enum):
    """Authorization tier. L1 is the most severe, L6 the least."""

    L1 = "L1"
    L2 = "L2"
    L3 = "L3"
    L4 = "L4"
    L5 = "L5"
    L6 = "L6"

    @property
    def severity(self) -> int:
        """1 for the most severe level, 6 for the least severe."""
        return int(self.value[1:])

    @classmethod
    def ordered(cls) -> list["RaiseLevel"]:
        """All levels from most to least severe."""
        return sorted(cls, key=lambda lvl: lvl.severity)

    @classmethod
    def most_severe(cls) -> "RaiseLevel":
        return cls.ordered()[0]

    @classmethod
    def least_severe(cls) -> "RaiseLevel":
        return cls.ordered()[-1]

    def is_more_severe_than(self, other: "RaiseLevel") -> bool:
        return self.severity < other.severity

    def shifted(self, steps: int) -> "RaiseLevel":
        """
        Move `steps` towards more severe (positive) or less severe (negative).
        Clamped at both ends of the scale.
        """
        ordered = self.ordered()
        index = ordered.index(self) - steps
        index = max(0, min(len(ordered) - 1, index))
        return ordered[index]


class Phase(str, Enum):
    """Stage of the approval workflow."""

    PLANNING = "Planning"
    ATP = "ATP"
    ATS = "ATS"
    AWAITING = "Awaiting"
    ATC = "ATC"
    WON = "Won"
    LOST = "Lost"
    HANDOVER = "Handover"


# Phases a deal walks through; Won/Lost are outcomes, not workflow steps.
WORKFLOW_PHASES: tuple[Phase, ...] = (
    Phase.PLANNING,
    Phase.ATP,
    Phase.ATS,
    Phase.ATC,
    Phase.HANDOVER,
)


class CamelModel(BaseModel):
    """Base for records exchanged with the camelCase application layer."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class KcpDeviation(CamelModel):
    """A deviation from a Key Contracting Principle."""

    id: str
    type: str = "Other"  # Financial | Legal | Compliance | Operations | Other
    description: str = ""
    expert_opinion: Optional[str] = None  # Green | Yellow | Red
    expert_name: Optional[str] = None


class Lot(CamelModel):
    """One lot of a multi-lot opportunity."""

    id: str
    name: str = ""
    tcv: Decimal = Decimal("0")
    raise_tcv: Decimal = Decimal("0")
    margin_percent: Optional[Decimal] = None
    description: Optional[str] = None


class Opportunity(CamelModel):
    """
    Business opportunity as supplied by the workflow layer.
    Only a handful of fields drive the engine; everything else passes through.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str = ""
    title: str = ""
    customer_id: Optional[str] = None
    client_name: Optional[str] = None
    industry: Optional[str] = None

    tcv: Decimal = Field(default=Decimal("0"), description="Committed contract value")
    raise_tcv: Decimal = Field(
        default=Decimal("0"),
        description="TCV including optional parts; basis for the RAISE level",
    )
    services_value: Optional[Decimal] = None

    current_phase: Phase = Phase.PLANNING
    raise_level: Optional[RaiseLevel] = None

    has_kcp_deviations: bool = False
    is_fast_track: bool = False
    is_rti: bool = False
    is_mandataria: Optional[bool] = None
    is_public_sector: bool = False

    has_social_clauses: bool = False
    is_non_core_business: bool = False
    has_low_risk_services: bool = False
    is_small_ticket: bool = False
    is_new_customer: bool = False
    is_child: bool = False

    has_suppliers: Optional[bool] = None
    supplier_alignment: Optional[str] = None

    is_multi_lot: Optional[bool] = None
    are_lots_mutually_exclusive: Optional[bool] = None
    lots: list[Lot] = Field(default_factory=list)

    deviations: list[KcpDeviation] = Field(default_factory=list)

    margin_percent: Optional[Decimal] = None
    first_margin_percent: Optional[Decimal] = None
    cash_flow_neutral: Optional[bool] = None
    privacy_risk_level: Optional[str] = None  # Low | Medium | High | VeryHigh

    @field_validator(
        "has_kcp_deviations",
        "is_fast_track",
        "is_rti",
        "is_public_sector",
        "has_social_clauses",
        "is_non_core_business",
        "has_low_risk_services",
        "is_small_ticket",
        "is_new_customer",
        "is_child",
        mode="before",
    )
    @classmethod
    def _none_is_false(cls, value):
        return False if value is None else value
