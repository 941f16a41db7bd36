"""Pre-submission guards: duplicate detection and network checks."""

from .duplicate import DuplicateCandidate, DuplicateCheckResult, DuplicateSubmissionGuard, base_program_id
from .network import NetworkGuard

__all__ = [
    "DuplicateCandidate",
    "DuplicateCheckResult",
    "DuplicateSubmissionGuard",
    "NetworkGuard",
    "base_program_id",
]
