"""RAISE authorization level engine: levels, fast track and checkpoints."""

from raise_engine.authorization import (
    DEFAULT_AUTHORIZATION_MATRIX,
    AuthorizationMatrix,
    LevelCalculator,
    calculate_raise_level,
)
from raise_engine.checkpoints import get_required_checkpoints
from raise_engine.conditions import evaluate_condition
from raise_engine.fast_track import is_fast_track_eligible
from raise_engine.models import (
    Checkpoint,
    ControlConfig,
    Opportunity,
    Phase,
    RaiseLevel,
    RuleThresholds,
)

__all__ = [
    "AuthorizationMatrix",
    "Checkpoint",
    "ControlConfig",
    "DEFAULT_AUTHORIZATION_MATRIX",
    "LevelCalculator",
    "Opportunity",
    "Phase",
    "RaiseLevel",
    "RuleThresholds",
    "calculate_raise_level",
    "evaluate_condition",
    "get_required_checkpoints",
    "is_fast_track_eligible",
]
