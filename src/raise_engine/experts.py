"""Expert involvement by RAISE level."""

from typing import Optional

from pydantic import Field

from raise_engine.models.opportunity import CamelModel, RaiseLevel

_UP_TO_L5 = [RaiseLevel.L1, RaiseLevel.L2, RaiseLevel.L3, RaiseLevel.L4, RaiseLevel.L5]


class ExpertConfig(CamelModel):
    """A support function that may have to review an opportunity."""

    id: str
    function: str
    display_name: str
    applicable_levels: list[RaiseLevel] = Field(default_factory=list)
    involvement_condition: str = ""
    email: Optional[str] = None
    notes: Optional[str] = None


def experts_for_level(level: RaiseLevel, experts: list[ExpertConfig]) -> list[ExpertConfig]:
    """Experts whose applicable levels include `level`, in configured order."""
    return [expert for expert in experts if level in expert.applicable_levels]


DEFAULT_EXPERTS: list[ExpertConfig] = [
    ExpertConfig(
        id="finance",
        function="Finance",
        display_name="Finance",
        applicable_levels=_UP_TO_L5,
        involvement_condition=(
            "Mandatory with KCP deviations, foreign activities, or services with TCV > 300k"
        ),
    ),
    ExpertConfig(
        id="procurement",
        function="Procurement",
        display_name="Procurement",
        applicable_levels=_UP_TO_L5,
        involvement_condition=(
            "Mandatory for unlisted suppliers, foreign reselling > 200k, reselling margin "
            "< 5%, or supplier/customer T&C misalignment"
        ),
    ),
    ExpertConfig(
        id="legal",
        function="Legal",
        display_name="Legal",
        applicable_levels=_UP_TO_L5,
        involvement_condition=(
            "Mandatory on L1-L2; on other levels with KCP deviations or misaligned "
            "T&C on HW/SW reselling"
        ),
    ),
    ExpertConfig(
        id="compliance231",
        function="Compliance231",
        display_name="Compliance 231 & Ethics",
        applicable_levels=_UP_TO_L5,
        involvement_condition="Foreign activities, non-EU customers, ethics in general",
    ),
    ExpertConfig(
        id="dataPrivacy",
        function="DataPrivacy",
        display_name="Data Privacy Manager",
        applicable_levels=_UP_TO_L5,
        involvement_condition="Mandatory when privacy risk is High or Very High",
    ),
    ExpertConfig(
        id="risk",
        function="Risk",
        display_name="Senior Risk Manager",
        applicable_levels=_UP_TO_L5,
        involvement_condition=(
            "Mandatory on L1-L3 with KCP deviations, and on L4-L5 when risks exceed 2%"
        ),
    ),
    ExpertConfig(
        id="security",
        function="Security",
        display_name="Chief Security Officer",
        applicable_levels=_UP_TO_L5,
        involvement_condition="Security topics",
    ),
]
