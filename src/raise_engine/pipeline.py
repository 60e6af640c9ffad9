"""Full assessment of one opportunity: level, fast track, checkpoints, experts."""

from typing import Optional, Union

from pydantic import BaseModel, Field

from raise_engine.authorization import LevelCalculator, LevelResult
from raise_engine.authorization.matrix import AuthorizationLevel
from raise_engine.checkpoints import get_required_checkpoints
from raise_engine.conditions import ConditionError
from raise_engine.experts import ExpertConfig, experts_for_level
from raise_engine.fast_track import WorkflowStep, fast_track_inhibitors, workflow_phases
from raise_engine.models.controls import Checkpoint
from raise_engine.models.opportunity import Opportunity, Phase
from raise_engine.settings import EngineSettings


class Assessment(BaseModel):
    """Everything the workflow screen needs for one opportunity and phase."""

    opportunity_id: str
    phase: str
    level: LevelResult
    authorization: Optional[AuthorizationLevel] = None
    fast_track: bool
    fast_track_inhibitors: list[str] = Field(default_factory=list)
    workflow: list[WorkflowStep] = Field(default_factory=list)
    checkpoints: list[Checkpoint] = Field(default_factory=list)
    experts: list[ExpertConfig] = Field(default_factory=list)
    condition_errors: list[str] = Field(
        default_factory=list,
        description="Conditions that failed to parse or named unknown fields",
    )


def assess_opportunity(
    opp: Opportunity,
    settings: Optional[EngineSettings] = None,
    *,
    phase: Optional[Union[Phase, str]] = None,
    test_mode: Optional[bool] = None,
) -> Assessment:
    """
    Assess `opp` against one settings snapshot. Phase defaults to the
    opportunity's current phase; test_mode defaults to the settings' resolution.
    """
    settings = settings or EngineSettings()
    phase = phase if phase is not None else opp.current_phase
    if test_mode is None:
        test_mode = settings.test_mode_active()

    calculator = LevelCalculator(settings.authorization_matrix, settings.thresholds)
    level = calculator.evaluate(opp)

    inhibitors = fast_track_inhibitors(opp, settings.thresholds)
    condition_errors: list[str] = []

    def _record(exc: ConditionError) -> None:
        condition_errors.append(f"{exc.expression}: {exc}")

    checkpoints = get_required_checkpoints(
        phase,
        opp,
        settings.controls,
        test_mode=test_mode,
        on_condition_error=_record,
    )

    return Assessment(
        opportunity_id=opp.id,
        phase=phase.value if isinstance(phase, Phase) else phase,
        level=level,
        authorization=settings.authorization_matrix.info_for(level.level),
        fast_track=not inhibitors,
        fast_track_inhibitors=inhibitors,
        workflow=workflow_phases(not inhibitors),
        checkpoints=checkpoints,
        experts=experts_for_level(level.level, settings.experts),
        condition_errors=condition_errors,
    )
