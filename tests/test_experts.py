"""Unit tests for expert involvement."""

from raise_engine.experts import DEFAULT_EXPERTS, ExpertConfig, experts_for_level
from raise_engine.models.opportunity import RaiseLevel


class TestExpertsForLevel:
    """Tests for experts_for_level."""

    def test_default_experts_on_l1(self) -> None:
        """Every default function reviews the most severe deals."""
        experts = experts_for_level(RaiseLevel.L1, DEFAULT_EXPERTS)
        assert [e.id for e in experts] == [
            "finance",
            "procurement",
            "legal",
            "compliance231",
            "dataPrivacy",
            "risk",
            "security",
        ]

    def test_no_experts_on_l6(self) -> None:
        """Least severe level needs no expert."""
        assert experts_for_level(RaiseLevel.L6, DEFAULT_EXPERTS) == []

    def test_custom_configuration(self) -> None:
        """Applicable levels come from configuration, camelCase accepted."""
        experts = [
            ExpertConfig.model_validate(
                {"id": "tax", "function": "Tax", "displayName": "Tax", "applicableLevels": ["L6"]}
            )
        ]
        assert [e.id for e in experts_for_level(RaiseLevel.L6, experts)] == ["tax"]
        assert experts_for_level(RaiseLevel.L1, experts) == []
