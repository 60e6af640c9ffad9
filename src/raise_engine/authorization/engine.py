"""Level calculator with an explanation trail."""

import logging
from typing import Optional

from pydantic import BaseModel, Field

from raise_engine.authorization.matrix import DEFAULT_AUTHORIZATION_MATRIX, AuthorizationMatrix
from raise_engine.models.opportunity import Opportunity, RaiseLevel
from raise_engine.models.thresholds import RuleThresholds

from .rules import (
    apply_base_level_rule,
    apply_deviation_shift_rule,
    apply_direct_force_rule,
    apply_low_risk_services_rule,
)

logger = logging.getLogger(__name__)


class LevelResult(BaseModel):
    """Outcome of a level calculation."""

    level: RaiseLevel
    base_level: Optional[RaiseLevel] = Field(
        default=None,
        description="Matrix level before overrides; None when a direct-force rule fired",
    )
    explanations: list[str] = Field(default_factory=list)
    applied_rules: list[str] = Field(
        default_factory=list,
        description="Rules that changed or fixed the level (force|escalation|shift)",
    )


class LevelCalculator:
    """
    Computes the RAISE level. Rule order is fixed:
    direct force, matrix base level, low-risk-services escalation, deviation shift.
    """

    def __init__(
        self,
        matrix: Optional[AuthorizationMatrix] = None,
        thresholds: Optional[RuleThresholds] = None,
    ):
        self.matrix = matrix if matrix is not None else DEFAULT_AUTHORIZATION_MATRIX
        self.thresholds = thresholds if thresholds is not None else RuleThresholds()

    def evaluate(self, opp: Opportunity) -> LevelResult:
        """Apply every rule and return the level with its explanation trail."""
        forced, explanation = apply_direct_force_rule(opp)
        if forced is not None:
            logger.debug("Opportunity %s: %s", opp.id, explanation)
            return LevelResult(level=forced, explanations=[explanation], applied_rules=["force"])

        explanations = [explanation]
        applied: list[str] = []

        base, explanation = apply_base_level_rule(opp, self.matrix)
        explanations.append(explanation)

        level, explanation = apply_low_risk_services_rule(opp, base, self.thresholds)
        explanations.append(explanation)
        if level != base:
            applied.append("escalation")

        before_shift = level
        level, explanation = apply_deviation_shift_rule(opp, level)
        explanations.append(explanation)
        if level != before_shift:
            applied.append("shift")

        logger.debug("Opportunity %s: base %s -> %s", opp.id, base.value, level.value)
        return LevelResult(
            level=level,
            base_level=base,
            explanations=explanations,
            applied_rules=applied,
        )

    def calculate(self, opp: Opportunity) -> RaiseLevel:
        return self.evaluate(opp).level

    def calculate_many(self, opportunities: list[Opportunity]) -> list[LevelResult]:
        return [self.evaluate(opp) for opp in opportunities]


def calculate_raise_level(
    opp: Opportunity,
    *,
    matrix: Optional[AuthorizationMatrix] = None,
    thresholds: Optional[RuleThresholds] = None,
) -> RaiseLevel:
    """RAISE level for an opportunity under the given (or default) matrix."""
    return LevelCalculator(matrix, thresholds).calculate(opp)
