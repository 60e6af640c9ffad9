"""Under-margin checks against configured margin thresholds."""

from decimal import Decimal
from typing import Optional

from raise_engine.models.opportunity import CamelModel, RaiseLevel

# Approval level when a margin falls below the hard minimum
BELOW_MINIMUM_APPROVAL_LEVEL = RaiseLevel.L3
DEFAULT_APPROVAL_LEVEL = RaiseLevel.L4


class MarginThreshold(CamelModel):
    """Target and minimum first-margin percentages for one kind of business."""

    id: str
    type: str  # Products | Services | Practice
    name: str
    target_margin: Decimal
    minimum_margin: Decimal
    approval_required: bool = True
    approver_level: Optional[RaiseLevel] = None
    notes: Optional[str] = None


def _find(threshold_id: str, thresholds: list[MarginThreshold]) -> Optional[MarginThreshold]:
    return next((t for t in thresholds if t.id == threshold_id), None)


def is_under_margin(
    threshold_id: str, actual_margin: Decimal, thresholds: list[MarginThreshold]
) -> bool:
    """Below the target margin. Unknown threshold ids are never under margin."""
    threshold = _find(threshold_id, thresholds)
    if threshold is None:
        return False
    return actual_margin < threshold.target_margin


def requires_margin_approval(
    threshold_id: str, actual_margin: Decimal, thresholds: list[MarginThreshold]
) -> bool:
    threshold = _find(threshold_id, thresholds)
    if threshold is None:
        return False
    return actual_margin < threshold.target_margin and threshold.approval_required


def required_approval_level(
    threshold_id: str, actual_margin: Decimal, thresholds: list[MarginThreshold]
) -> Optional[RaiseLevel]:
    """
    Level that must approve an under-margin deal, or None if no approval is due.
    Below the minimum always escalates to BELOW_MINIMUM_APPROVAL_LEVEL.
    """
    threshold = _find(threshold_id, thresholds)
    if threshold is None:
        return None
    if actual_margin < threshold.minimum_margin:
        return BELOW_MINIMUM_APPROVAL_LEVEL
    if actual_margin < threshold.target_margin and threshold.approval_required:
        return threshold.approver_level or DEFAULT_APPROVAL_LEVEL
    return None


def _threshold(id_, type_, name, target, minimum, level=RaiseLevel.L4, notes=None):
    return MarginThreshold(
        id=id_,
        type=type_,
        name=name,
        target_margin=Decimal(target),
        minimum_margin=Decimal(minimum),
        approval_required=True,
        approver_level=level,
        notes=notes,
    )


DEFAULT_MARGIN_THRESHOLDS: list[MarginThreshold] = [
    _threshold("products-reselling", "Products", "Product reselling (HW/SW)", "16", "10"),
    _threshold("products-var", "Products", "VAR (Value Added Reselling)", "20", "15"),
    _threshold("services-standard", "Services", "Standard services", "25", "18"),
    _threshold(
        "services-managed",
        "Services",
        "Managed services",
        "22",
        "15",
        level=RaiseLevel.L3,
        notes="Multi-year managed services run on tighter margins.",
    ),
    _threshold("practice-consulting", "Practice", "Practice Consulting", "30", "22"),
    _threshold("practice-development", "Practice", "Practice Development", "28", "20"),
    _threshold("practice-infrastructure", "Practice", "Practice Infrastructure", "24", "16"),
    _threshold("practice-cloud", "Practice", "Practice Cloud", "26", "18"),
    _threshold("practice-security", "Practice", "Practice Security", "32", "25"),
    _threshold("practice-data", "Practice", "Practice Data & Analytics", "28", "20"),
]
