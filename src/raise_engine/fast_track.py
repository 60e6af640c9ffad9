"""Fast-track eligibility and the phases it skips."""

from typing import Optional

from pydantic import BaseModel

from raise_engine.models.opportunity import WORKFLOW_PHASES, Opportunity, Phase
from raise_engine.models.thresholds import RuleThresholds

# Fast-track deals go straight from Planning to ATC
FAST_TRACK_SKIPPED_PHASES: tuple[Phase, ...] = (Phase.ATP, Phase.ATS)


def fast_track_inhibitors(
    opp: Opportunity, thresholds: Optional[RuleThresholds] = None
) -> list[str]:
    """Every reason the opportunity cannot take the fast track; empty when eligible."""
    thresholds = thresholds or RuleThresholds()
    reasons: list[str] = []
    if opp.raise_tcv >= thresholds.fast_track_max_raise_tcv:
        reasons.append(
            f"RAISE TCV {opp.raise_tcv} not below {thresholds.fast_track_max_raise_tcv}"
        )
    if opp.has_kcp_deviations:
        reasons.append("KCP deviations")
    if opp.is_new_customer:
        reasons.append("New customer")
    # Small tickets need a separate pre-approval, so they never qualify here.
    if opp.is_small_ticket:
        reasons.append("Small ticket without pre-approval")
    return reasons


def is_fast_track_eligible(
    opp: Opportunity, thresholds: Optional[RuleThresholds] = None
) -> bool:
    """True only if no inhibitor applies. Independent of the level calculation."""
    return not fast_track_inhibitors(opp, thresholds)


class WorkflowStep(BaseModel):
    """A workflow phase as shown to the user."""

    phase: Phase
    skipped: bool = False


def workflow_phases(fast_track: bool) -> list[WorkflowStep]:
    """Workflow phases in order, marking those skipped on the fast track."""
    return [
        WorkflowStep(phase=phase, skipped=fast_track and phase in FAST_TRACK_SKIPPED_PHASES)
        for phase in WORKFLOW_PHASES
    ]


def next_phase(current: Phase) -> Optional[Phase]:
    """Following workflow phase; None after the last one or for outcome phases."""
    if current not in WORKFLOW_PHASES:
        return None
    index = WORKFLOW_PHASES.index(current)
    if index + 1 < len(WORKFLOW_PHASES):
        return WORKFLOW_PHASES[index + 1]
    return None
