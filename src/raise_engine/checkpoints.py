"""Resolve which configured controls become checkpoints for a phase."""

import logging
from typing import Optional, Union

from raise_engine.conditions import evaluate_condition
from raise_engine.conditions.evaluator import ErrorCallback
from raise_engine.models.controls import ALL_PHASES, Checkpoint, ControlConfig
from raise_engine.models.opportunity import Opportunity, Phase

logger = logging.getLogger(__name__)


def _phase_value(phase: Union[Phase, str]) -> str:
    return phase.value if isinstance(phase, Phase) else phase


def applies_to_phase(control: ControlConfig, phase: Union[Phase, str]) -> bool:
    """Control belongs to the phase or is cross-phase ('ALL')."""
    return control.phase in (_phase_value(phase), ALL_PHASES)


def to_checkpoint(control: ControlConfig, *, test_mode: bool = False) -> Checkpoint:
    """Fresh, unchecked checkpoint for a control; test mode makes it optional."""
    return Checkpoint(
        id=control.id,
        label=control.label,
        description=control.description,
        required=False if test_mode else control.is_mandatory,
        checked=False,
        order=control.order,
        attachments=[],
        template_ref=control.template_ref,
        action_type=control.action_type,
        detailed_description=control.detailed_description,
        folder_path=control.folder_path,
        template_links=control.template_links,
        mandatory_notes=control.mandatory_notes,
    )


def get_required_checkpoints(
    phase: Union[Phase, str],
    opp: Opportunity,
    controls: Optional[list[ControlConfig]],
    *,
    test_mode: bool = False,
    on_condition_error: Optional[ErrorCallback] = None,
) -> list[Checkpoint]:
    """
    Checkpoints for `phase`: controls of that phase or 'ALL' whose condition
    holds for `opp`, in input order. No controls means no checkpoints.
    test_mode forces every checkpoint to be optional (end-to-end test runs).
    """
    if not controls:
        return []

    checkpoints = [
        to_checkpoint(control, test_mode=test_mode)
        for control in controls
        if applies_to_phase(control, phase)
        and evaluate_condition(control.condition, opp, on_error=on_condition_error)
    ]
    logger.debug(
        "Phase %s: %d of %d controls apply to opportunity %s",
        _phase_value(phase),
        len(checkpoints),
        len(controls),
        opp.id,
    )
    return checkpoints
