"""SubmissionStatus - phases of one attestation submission."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from ..errors import InvalidStatusTransition

logger = logging.getLogger(__name__)


class SubmissionStatus(str, Enum):
    IDLE = "idle"
    PREPARING = "preparing"
    AWAITING_SIGNATURE = "awaiting_signature"
    SUBMITTING = "submitting"
    INDEXING = "indexing"
    INDEXED = "indexed"
    FAILED = "failed"


FORWARD_SEQUENCE = (
    SubmissionStatus.IDLE,
    SubmissionStatus.PREPARING,
    SubmissionStatus.AWAITING_SIGNATURE,
    SubmissionStatus.SUBMITTING,
    SubmissionStatus.INDEXING,
    SubmissionStatus.INDEXED,
)

TERMINAL_STATUSES = {SubmissionStatus.INDEXED, SubmissionStatus.FAILED}

StatusListener = Callable[[SubmissionStatus, SubmissionStatus], None]


class SubmissionStatusTracker:
    """Forward-only state machine; FAILED is reachable from any non-terminal state.

    Listeners are called with ``(previous, current)`` after each transition.
    """

    def __init__(self, listener: Optional[StatusListener] = None) -> None:
        self._status = SubmissionStatus.IDLE
        self._listeners: list[StatusListener] = [listener] if listener else []
        self.failure_reason: Optional[str] = None

    @property
    def status(self) -> SubmissionStatus:
        return self._status

    @property
    def is_terminal(self) -> bool:
        return self._status in TERMINAL_STATUSES

    def subscribe(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def advance_to(self, target: SubmissionStatus) -> None:
        """Move to the next phase in the forward sequence.

        Raises:
            InvalidStatusTransition: if ``target`` is not the immediate successor
                of the current status, or the current status is terminal.
        """
        if target is SubmissionStatus.FAILED:
            self.fail("unspecified")
            return
        if self.is_terminal:
            raise InvalidStatusTransition(f"{self._status.value} is terminal")
        current_index = FORWARD_SEQUENCE.index(self._status)
        if current_index + 1 >= len(FORWARD_SEQUENCE) or FORWARD_SEQUENCE[current_index + 1] is not target:
            raise InvalidStatusTransition(
                f"Cannot move from {self._status.value} to {target.value}"
            )
        self._set(target)

    def fail(self, reason: str) -> None:
        if self.is_terminal:
            raise InvalidStatusTransition(f"{self._status.value} is terminal")
        self.failure_reason = reason
        self._set(SubmissionStatus.FAILED)

    def _set(self, target: SubmissionStatus) -> None:
        previous, self._status = self._status, target
        logger.debug("submission_status from=%s to=%s", previous.value, target.value)
        for listener in self._listeners:
            listener(previous, target)
