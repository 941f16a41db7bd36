"""Attestation payload assembly and submission."""

from .payload import GrantSubmissionPayload, build_payload, resolve_recipient
from .submitter import AttestationSubmitter, SubmissionOutcome, SubmissionResult

__all__ = [
    "AttestationSubmitter",
    "GrantSubmissionPayload",
    "SubmissionOutcome",
    "SubmissionResult",
    "build_payload",
    "resolve_recipient",
]
