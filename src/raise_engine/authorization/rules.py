"""Level rules: each returns (level, explanation). Applied in order by LevelCalculator."""

from decimal import Decimal
from typing import Optional

from raise_engine.authorization.matrix import AuthorizationMatrix
from raise_engine.models.opportunity import Opportunity, RaiseLevel
from raise_engine.models.thresholds import RuleThresholds


def apply_direct_force_rule(opp: Opportunity) -> tuple[Optional[RaiseLevel], str]:
    """
    Social clauses or non-core business force the most severe level.
    Returns (None, explanation) when the rule does not fire.
    """
    top = RaiseLevel.most_severe()
    if opp.has_social_clauses:
        return top, f"Forced to {top.value}: social clauses"
    if opp.is_non_core_business:
        return top, f"Forced to {top.value}: non-core business"
    return None, "No direct-force condition"


def apply_base_level_rule(
    opp: Opportunity, matrix: AuthorizationMatrix
) -> tuple[RaiseLevel, str]:
    """Base level from the authorization matrix using RAISE TCV (not plain TCV)."""
    level = matrix.level_for_value(opp.raise_tcv)
    return level, f"Base level {level.value} from RAISE TCV {opp.raise_tcv}"


def apply_low_risk_services_rule(
    opp: Opportunity,
    level: RaiseLevel,
    thresholds: RuleThresholds,
) -> tuple[RaiseLevel, str]:
    """
    Low-risk services worth at least the threshold escalate any less severe
    level to the second most severe one. Never de-escalates.
    """
    if not opp.has_low_risk_services:
        return level, "No low-risk services"

    services = opp.services_value or Decimal("0")
    if services < thresholds.services_escalation_min:
        return level, (
            f"Low-risk services {services} below {thresholds.services_escalation_min}"
        )

    target = RaiseLevel.most_severe().shifted(-1)
    if not target.is_more_severe_than(level):
        return level, f"Low-risk services: {level.value} already at or above {target.value}"

    return target, f"Escalated {level.value} -> {target.value}: low-risk services {services}"


def apply_deviation_shift_rule(opp: Opportunity, level: RaiseLevel) -> tuple[RaiseLevel, str]:
    """
    KCP deviations or a new customer shift the two least severe levels one
    step up. Both flags together still shift once.
    """
    reasons = []
    if opp.has_kcp_deviations:
        reasons.append("KCP deviations")
    if opp.is_new_customer:
        reasons.append("new customer")
    if not reasons:
        return level, "No KCP deviations or new customer"

    bottom = RaiseLevel.least_severe()
    shiftable = (bottom, bottom.shifted(1))
    if level not in shiftable:
        return level, f"{level.value} unchanged by {', '.join(reasons)}"

    shifted = level.shifted(1)
    return shifted, f"Shifted {level.value} -> {shifted.value}: {', '.join(reasons)}"
