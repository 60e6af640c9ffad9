"""Checkpoint configuration and resolved checkpoints."""

from typing import Optional

from pydantic import Field

from raise_engine.models.opportunity import CamelModel

# Phase value for controls that apply in every phase
ALL_PHASES = "ALL"


class TemplateLink(CamelModel):
    """Link to a document template."""

    name: str
    url: str


class ControlConfig(CamelModel):
    """A configured checkpoint definition, owned by the settings layer."""

    id: str
    label: str
    description: str = ""
    phase: str = Field(..., description="Workflow phase or 'ALL'")
    order: Optional[int] = None
    is_mandatory: bool = False
    condition: Optional[str] = Field(
        default=None,
        description="Boolean expression over opportunity fields, e.g. 'opp.isRti === true'",
    )

    template_ref: Optional[str] = None
    action_type: Optional[str] = None  # document | email | notification | task
    detailed_description: Optional[str] = None
    folder_path: Optional[str] = None
    template_links: Optional[list[TemplateLink]] = None
    mandatory_notes: Optional[str] = None


class Checkpoint(CamelModel):
    """A checkpoint resolved for one phase of one opportunity. Never persisted here."""

    id: str
    label: str
    description: str = ""
    required: bool = False
    checked: bool = False
    order: Optional[int] = None
    attachments: list = Field(default_factory=list)

    template_ref: Optional[str] = None
    action_type: Optional[str] = None
    detailed_description: Optional[str] = None
    folder_path: Optional[str] = None
    template_links: Optional[list[TemplateLink]] = None
    mandatory_notes: Optional[str] = None
