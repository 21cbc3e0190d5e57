"""Pydantic model for the onboarding/approval status payload."""

import json
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OnboardingStatus(str, Enum):
    INCOMPLETE = "INCOMPLETE"
    COMPLETED = "COMPLETED"


class ApprovalStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ApprovalState(BaseModel):
    """Server-reported onboarding and approval state plus profile fields.

    Statuses are kept as the raw strings the backend sent; values outside
    the known enums never count as completed or approved.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    onboarding_status: str = Field(
        default=OnboardingStatus.INCOMPLETE.value, alias="onboardingStatus"
    )
    approval_status: str = Field(
        default=ApprovalStatus.PENDING.value, alias="approvalStatus"
    )

    id: Optional[str] = None
    name: Optional[str] = None
    service_areas: list[str] = Field(default_factory=list, alias="serviceAreas")

    @field_validator("service_areas", mode="before")
    @classmethod
    def _parse_service_areas(cls, value: Any) -> Any:
        # Older agencies have service areas stored as a JSON string
        if value is None:
            return []
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
            except json.JSONDecodeError:
                return []
            return parsed if isinstance(parsed, list) else []
        return value

    @property
    def onboarding_completed(self) -> bool:
        return self.onboarding_status == OnboardingStatus.COMPLETED

    @property
    def approved(self) -> bool:
        return self.approval_status == ApprovalStatus.APPROVED
