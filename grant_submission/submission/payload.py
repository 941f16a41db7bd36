"""Assemble the structured grant / details / milestone records for attestation."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field

from ..errors import SubmissionFailure
from ..models import FlowType, GrantSubmissionSession, MilestoneDraft, SubmitterContext
from ..wizard.flows import PROGRAM_APPLICATION_MARKER, get_flow

logger = logging.getLogger(__name__)


class GrantRecord(BaseModel):
    community_uid: str
    project_uid: str = Field(..., description="refUID of the grant attestation")
    recipient: str


class GrantDetailsRecord(BaseModel):
    title: str
    description: str
    amount: Optional[str] = None
    proposal_url: Optional[str] = None
    start_date: Optional[int] = Field(None, description="Unix seconds")
    program_id: Optional[str] = None
    fund_usage: Optional[str] = None
    proof_of_work_url: Optional[str] = None
    questions: list[dict[str, Any]] = Field(default_factory=list)
    selected_track_ids: list[str] = Field(default_factory=list)
    payout_address: str


class MilestoneRecord(BaseModel):
    title: str
    description: str = ""
    completion_note: Optional[str] = None
    ends_at: int = Field(..., description="Unix seconds")
    starts_at: Optional[int] = None
    priority: Optional[int] = None


class GrantSubmissionPayload(BaseModel):
    """Everything the attestation client needs to build the grant attestation."""

    flow_type: FlowType
    network_id: int
    grant: GrantRecord
    details: GrantDetailsRecord
    milestones: list[MilestoneRecord] = Field(default_factory=list)


def sanitize(value: Any) -> Any:
    """Trim strings and drop empty values, recursively."""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, dict):
        cleaned = {k: sanitize(v) for k, v in value.items()}
        return {k: v for k, v in cleaned.items() if v not in (None, "")}
    if isinstance(value, list):
        return [sanitize(v) for v in value]
    return value


def to_unix(value: Optional[datetime]) -> Optional[int]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())


def resolve_recipient(requested: Optional[str], submitter: SubmitterContext) -> str:
    """Explicit recipients are honoured only for project or community admins."""
    if requested and submitter.has_elevated_permissions:
        return requested
    if requested and requested.lower() != submitter.address.lower():
        logger.info(
            "recipient_overridden project=%s requested=%s submitter=%s",
            submitter.project_uid, requested, submitter.address,
        )
    return submitter.address


def _milestone_record(draft: MilestoneDraft) -> MilestoneRecord:
    return MilestoneRecord(
        **sanitize(
            {
                "title": draft.title,
                "description": draft.description,
                "completion_note": draft.completion_note,
                "ends_at": to_unix(draft.due_at),
                "starts_at": to_unix(draft.starts_at),
                "priority": draft.priority,
            }
        )
    )


def build_payload(session: GrantSubmissionSession, submitter: SubmitterContext) -> GrantSubmissionPayload:
    """Turn a completed session into the records to attest.

    Raises:
        SubmissionFailure: the session is missing the community or network, or
            holds a milestone draft that was never saved.
    """
    data = session.form_data
    flow = get_flow(session.flow_type)
    if not data.community_uid or data.network_id is None:
        raise SubmissionFailure("Session has no community / network selected")
    unsaved = [i for i, draft in enumerate(session.milestone_drafts) if not draft.is_valid]
    if unsaved:
        raise SubmissionFailure(f"Milestone drafts {unsaved} were never saved")

    description = (data.description or "").strip()
    if session.flow_type is FlowType.PROGRAM and PROGRAM_APPLICATION_MARKER not in description:
        description = f"{description}\n\n{PROGRAM_APPLICATION_MARKER}".strip()

    recipient = resolve_recipient(data.recipient, submitter)
    details = sanitize(
        {
            "title": data.title or flow.default_title,
            "description": description,
            "amount": data.amount,
            "proposal_url": data.proposal_url,
            "start_date": to_unix(data.start_date),
            "program_id": data.program_id,
            "fund_usage": data.fund_usage,
            "proof_of_work_url": data.proof_of_work_url,
            "questions": [q.model_dump() for q in data.questions],
            "selected_track_ids": list(data.selected_track_ids),
            "payout_address": submitter.address,
        }
    )

    return GrantSubmissionPayload(
        flow_type=session.flow_type,
        network_id=data.network_id,
        grant=GrantRecord(
            community_uid=data.community_uid,
            project_uid=submitter.project_uid,
            recipient=recipient,
        ),
        details=GrantDetailsRecord(**details),
        milestones=[_milestone_record(draft) for draft in session.milestone_drafts],
    )
