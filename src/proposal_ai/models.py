"""Pydantic data models for client intake."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Explicit defaults substituted for optional intake fields before rendering
NOT_SPECIFIED = "Not specified"
TBD = "TBD"


class IntakeData(BaseModel):
    """Client-supplied discovery data for a single proposal.

    Accepts snake_case or camelCase keys (``companyName``) so intake forms can
    post their payload unchanged.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    company_name: str = Field(min_length=1)
    industry: str = Field(min_length=1)
    business_challenge: str = Field(min_length=1)
    project_type: str = Field(min_length=1)
    tech_stack: Optional[str] = None
    duration: Optional[str] = None
    budget_range: Optional[str] = None
    success_criteria: Optional[str] = None

    @field_validator("tech_stack", "duration", "budget_range", "success_criteria", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def resolved(self) -> dict[str, str]:
        """Return every field as a string, optional ones replaced by explicit defaults."""
        return {
            "company_name": self.company_name,
            "industry": self.industry,
            "business_challenge": self.business_challenge,
            "project_type": self.project_type,
            "tech_stack": self.tech_stack or NOT_SPECIFIED,
            "duration": self.duration or TBD,
            "budget_range": self.budget_range or TBD,
            "success_criteria": self.success_criteria or NOT_SPECIFIED,
        }
