"""MilestoneDraft - an in-progress milestone validated locally before submission."""

from datetime import date, datetime, time, timezone
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator


def _as_utc(value: datetime) -> datetime:
    # naive timestamps are taken as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class MilestoneInput(BaseModel):
    """Schema a draft must satisfy to be saved."""

    title: str = Field(..., min_length=3, max_length=50)
    due_at: datetime = Field(..., description="Milestone end date")
    starts_at: Optional[datetime] = Field(None, description="Optional start date")
    priority: Optional[int] = Field(None, ge=1, le=5)
    description: str = Field(default="")
    completion_note: str = Field(default="")

    @field_validator("due_at", "starts_at", mode="before")
    @classmethod
    def _promote_dates(cls, value):
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime.combine(value, time.min)
        return value

    @model_validator(mode="after")
    def _starts_before_due(self) -> "MilestoneInput":
        if self.starts_at is not None and _as_utc(self.starts_at) > _as_utc(self.due_at):
            raise ValueError("Start date must be before the end date")
        return self


class MilestoneDraft(BaseModel):
    """One entry of the milestone list, with its view/edit toggle."""

    title: str = Field(default="")
    description: str = Field(default="")
    completion_note: str = Field(default="")
    due_at: Optional[datetime] = Field(None)
    starts_at: Optional[datetime] = Field(None)
    priority: Optional[int] = Field(None)
    is_valid: bool = Field(default=False, description="Set by a successful save")
    is_editing: bool = Field(default=True)
