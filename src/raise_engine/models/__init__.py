"""Data models for opportunities, checkpoints and rule thresholds."""

from raise_engine.models.controls import ALL_PHASES, Checkpoint, ControlConfig, TemplateLink
from raise_engine.models.opportunity import (
    WORKFLOW_PHASES,
    KcpDeviation,
    Lot,
    Opportunity,
    Phase,
    RaiseLevel,
)
from raise_engine.models.thresholds import RuleThresholds

__all__ = [
    "ALL_PHASES",
    "Checkpoint",
    "ControlConfig",
    "KcpDeviation",
    "Lot",
    "Opportunity",
    "Phase",
    "RaiseLevel",
    "RuleThresholds",
    "TemplateLink",
    "WORKFLOW_PHASES",
]
