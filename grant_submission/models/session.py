"""GrantSubmissionSession - accumulated wizard answers for one submission."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from .milestone_draft import MilestoneDraft


class FlowType(str, Enum):
    """Which wizard variant is active."""

    GRANT = "grant"
    PROGRAM = "program"


class QuestionAnswer(BaseModel):
    """Answer to a custom question asked by a community or program."""

    query: str = Field(..., description="Question text as asked")
    explanation: str = Field(default="", description="Applicant's answer")
    type: str = Field(default="text", description="Question type hint")


class FormData(BaseModel):
    """Answers collected across the wizard's steps."""

    community_uid: Optional[str] = Field(None, description="Target community attestation UID")
    network_id: Optional[int] = Field(None, description="Network required by the community")
    program_id: Optional[str] = Field(None, description="Funding program id, may carry a _<chainId> suffix")
    title: Optional[str] = Field(None, description="Grant title or program name")
    description: Optional[str] = Field(None, description="Markdown description")
    amount: Optional[str] = Field(None, description="Requested / awarded amount, free text")
    proposal_url: Optional[str] = Field(None, description="Link to the proposal")
    recipient: Optional[str] = Field(None, description="Grant recipient address")
    start_date: Optional[datetime] = Field(None, description="Grant start date")
    fund_usage: Optional[str] = Field(None, description="Budget breakdown table")
    proof_of_work_url: Optional[str] = Field(None, description="Link to proof of prior work")
    selected_track_ids: list[str] = Field(default_factory=list, description="Ordered set of track ids")
    questions: list[QuestionAnswer] = Field(default_factory=list, description="Custom question answers")

    model_config = {
        "json_schema_extra": {
            "example": {
                "community_uid": "0xcommunity",
                "network_id": 10,
                "program_id": "934_10",
                "title": "Retro Funding Round 5",
                "description": "Indexer tooling for the Optimism ecosystem",
                "amount": "25000 OP",
                "selected_track_ids": ["track-infra"],
            }
        }
    }

    def is_empty(self) -> bool:
        return self == FormData()


class GrantSubmissionSession(BaseModel):
    """State owned by one wizard instance for its whole lifetime."""

    flow_type: FlowType = Field(default=FlowType.GRANT)
    current_step: int = Field(default=1, ge=1)
    entry_step: int = Field(default=1, ge=1, description="First step reachable with retreat()")
    editing_grant_uid: Optional[str] = Field(None, description="Set when editing an existing grant")
    form_data: FormData = Field(default_factory=FormData)
    milestone_drafts: list[MilestoneDraft] = Field(default_factory=list)

    @property
    def is_editing_existing(self) -> bool:
        return self.editing_grant_uid is not None
