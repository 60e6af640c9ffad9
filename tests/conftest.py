"""Pytest fixtures for raise-engine tests."""

import pytest

from raise_engine.models.controls import ControlConfig, TemplateLink


@pytest.fixture
def sample_controls() -> list[ControlConfig]:
    """Controls spanning several phases, with and without conditions."""
    return [
        ControlConfig(
            id="plan-kickoff",
            label="Kick-off meeting",
            description="Hold the kick-off",
            phase="Planning",
            order=1,
            is_mandatory=True,
        ),
        ControlConfig(
            id="atp-deck",
            label="ATP slide deck",
            description="Prepare the ATP deck",
            phase="ATP",
            order=1,
            is_mandatory=True,
            action_type="document",
            folder_path="/Documents/ATP/",
            template_links=[TemplateLink(name="Slide Deck ATP", url="https://example.com/atp.pptx")],
            mandatory_notes="Always required",
        ),
        ControlConfig(
            id="all-crm",
            label="CRM up to date",
            description="Keep the CRM record current",
            phase="ALL",
            order=9,
            is_mandatory=False,
        ),
        ControlConfig(
            id="atp-rti",
            label="RTI mandate",
            description="Mandate from the joint-venture partners",
            phase="ATP",
            order=2,
            is_mandatory=True,
            condition="opp.isRti === true && opp.isMandataria === true",
        ),
        ControlConfig(
            id="atp-broken",
            label="Broken condition",
            description="Condition outside the grammar",
            phase="ATP",
            order=3,
            is_mandatory=True,
            condition="eval('1 + 1')",
        ),
        ControlConfig(
            id="ats-kcp",
            label="Expert opinion on KCP deviations",
            description="Finance opinion",
            phase="ATS",
            order=1,
            is_mandatory=True,
            condition="opp.hasKcpDeviations === true",
        ),
    ]
