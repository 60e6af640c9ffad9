"""Unit tests for data models."""

from decimal import Decimal

import pytest

from raise_engine.models.controls import Checkpoint, ControlConfig
from raise_engine.models.opportunity import WORKFLOW_PHASES, Opportunity, Phase, RaiseLevel


class TestRaiseLevel:
    """Tests for RaiseLevel ordering helpers."""

    def test_severity_order(self) -> None:
        """L1 is the most severe, L6 the least."""
        assert RaiseLevel.most_severe() is RaiseLevel.L1
        assert RaiseLevel.least_severe() is RaiseLevel.L6
        assert RaiseLevel.ordered() == [
            RaiseLevel.L1,
            RaiseLevel.L2,
            RaiseLevel.L3,
            RaiseLevel.L4,
            RaiseLevel.L5,
            RaiseLevel.L6,
        ]

    def test_is_more_severe_than(self) -> None:
        """Comparison follows the severity rank."""
        assert RaiseLevel.L2.is_more_severe_than(RaiseLevel.L3) is True
        assert RaiseLevel.L3.is_more_severe_than(RaiseLevel.L2) is False
        assert RaiseLevel.L4.is_more_severe_than(RaiseLevel.L4) is False

    def test_shifted_moves_towards_severe(self) -> None:
        """Positive steps go towards L1, negative towards L6."""
        assert RaiseLevel.L6.shifted(1) is RaiseLevel.L5
        assert RaiseLevel.L3.shifted(-1) is RaiseLevel.L4

    def test_shifted_is_clamped(self) -> None:
        """Shifting past either end stays at the end."""
        assert RaiseLevel.L1.shifted(1) is RaiseLevel.L1
        assert RaiseLevel.L6.shifted(-3) is RaiseLevel.L6


class TestOpportunity:
    """Tests for Opportunity model."""

    def test_accepts_camel_case_keys(self) -> None:
        """Records from the application layer use camelCase."""
        opp = Opportunity.model_validate(
            {"id": "o1", "raiseTcv": 300000, "hasKcpDeviations": True, "currentPhase": "ATP"}
        )
        assert opp.raise_tcv == Decimal("300000")
        assert opp.has_kcp_deviations is True
        assert opp.current_phase is Phase.ATP

    def test_none_booleans_are_false(self) -> None:
        """Explicit nulls on risk flags are treated as false."""
        opp = Opportunity.model_validate({"isNewCustomer": None, "hasSocialClauses": None})
        assert opp.is_new_customer is False
        assert opp.has_social_clauses is False

    def test_unknown_fields_pass_through(self) -> None:
        """Fields the engine does not know are kept untouched."""
        opp = Opportunity.model_validate({"id": "o1", "salesforceId": "SF-42"})
        assert opp.model_extra == {"salesforceId": "SF-42"}

    def test_dump_uses_aliases(self) -> None:
        """by_alias dump matches the application's field names."""
        data = Opportunity(id="o1", raise_tcv=Decimal("5")).model_dump(by_alias=True)
        assert "raiseTcv" in data
        assert "currentPhase" in data

    def test_workflow_phases_exclude_outcomes(self) -> None:
        """Won/Lost are outcomes, not workflow steps."""
        assert Phase.WON not in WORKFLOW_PHASES
        assert Phase.LOST not in WORKFLOW_PHASES
        assert WORKFLOW_PHASES[0] is Phase.PLANNING
        assert WORKFLOW_PHASES[-1] is Phase.HANDOVER


class TestControlModels:
    """Tests for ControlConfig and Checkpoint."""

    def test_control_requires_phase(self) -> None:
        """Phase is mandatory on a control."""
        with pytest.raises(ValueError):
            ControlConfig(id="c1", label="C1")

    def test_checkpoint_defaults(self) -> None:
        """A new checkpoint is unchecked with no attachments."""
        cp = Checkpoint(id="c1", label="C1")
        assert cp.checked is False
        assert cp.attachments == []
        assert cp.required is False
