"""Error taxonomy for the grant submission workflow."""

from __future__ import annotations

from typing import Any, Optional


class GrantSubmissionError(Exception):
    """Base class for every error raised by this package."""
    pass


class ValidationError(GrantSubmissionError):
    """Local, per-field validation failure. Never reported to error tracking."""

    def __init__(self, errors: dict[str, str], message: Optional[str] = None) -> None:
        self.errors = dict(errors)
        if message is None:
            message = "; ".join(f"{field}: {msg}" for field, msg in self.errors.items())
        super().__init__(message)


class WizardStateError(GrantSubmissionError):
    """Operation not allowed in the wizard's current step."""
    pass


class DuplicateDetected(GrantSubmissionError):
    """An equivalent grant or program application already exists on the project."""

    def __init__(self, result: Any) -> None:
        self.result = result
        matched = getattr(result, "matched_grant", None)
        uid = getattr(matched, "uid", "unknown")
        super().__init__(f"Project already has an equivalent grant ({uid})")


class NetworkMismatch(GrantSubmissionError):
    """Wallet is not on, and could not be switched to, the community's network."""

    def __init__(self, message: str, required_network_id: int, active_network_id: Optional[int] = None) -> None:
        self.required_network_id = required_network_id
        self.active_network_id = active_network_id
        super().__init__(message)


class SignatureRejected(GrantSubmissionError):
    """The user declined to sign. Informational, not a system error."""
    pass


class SubmissionFailure(GrantSubmissionError):
    """Building or broadcasting the attestation failed."""
    pass


class SubmissionInProgress(GrantSubmissionError):
    """A submission is already in flight for this wizard."""
    pass


class InvalidStatusTransition(GrantSubmissionError):
    """Raised when a submission status would move backwards or out of a terminal state."""
    pass


class IndexingTimeout(GrantSubmissionError):
    """The indexer did not expose the new record within the polling budget."""

    def __init__(self, record_uid: str, attempts: int) -> None:
        self.record_uid = record_uid
        self.attempts = attempts
        super().__init__(f"Record {record_uid} not indexed after {attempts} attempts")


class IndexerError(GrantSubmissionError):
    """Non-retryable indexer API error (4xx, malformed payload)."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class IndexerRetryableError(IndexerError):
    """Raised on 429 / 5xx so tenacity retries."""
    pass
