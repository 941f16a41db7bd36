"""Shared Pydantic models for the grant submission workflow."""

from .milestone_draft import MilestoneDraft, MilestoneInput
from .records import (
    Community,
    ExistingGrant,
    FundingProgram,
    ProjectRecordSet,
    SubmitterContext,
    Track,
    TransactionReceipt,
)
from .session import FlowType, FormData, GrantSubmissionSession, QuestionAnswer
from .submission_status import SubmissionStatus, SubmissionStatusTracker

__all__ = [
    "MilestoneDraft",
    "MilestoneInput",
    "Community",
    "ExistingGrant",
    "FundingProgram",
    "ProjectRecordSet",
    "SubmitterContext",
    "Track",
    "TransactionReceipt",
    "FlowType",
    "FormData",
    "GrantSubmissionSession",
    "QuestionAnswer",
    "SubmissionStatus",
    "SubmissionStatusTracker",
]
