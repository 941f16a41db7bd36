"""MilestoneSetEditor - CRUD over milestone drafts with per-item edit state."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import pydantic

from ..errors import ValidationError
from ..models import MilestoneDraft, MilestoneInput

logger = logging.getLogger(__name__)


def _field_errors(exc: pydantic.ValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "milestone"
        errors.setdefault(field, err["msg"])
    return errors


class MilestoneSetEditor:
    """Ordered milestone drafts, each independently editable and validatable."""

    def __init__(self) -> None:
        self._drafts: list[MilestoneDraft] = []

    def __len__(self) -> int:
        return len(self._drafts)

    @property
    def drafts(self) -> list[MilestoneDraft]:
        return [draft.model_copy(deep=True) for draft in self._drafts]

    def add_draft(self) -> int:
        """Append an empty draft in edit mode. Returns its index."""
        self._drafts.append(MilestoneDraft())
        return len(self._drafts) - 1

    def remove_draft(self, index: int) -> None:
        self._check_index(index)
        del self._drafts[index]

    def save_draft(self, index: int, data: Mapping[str, Any]) -> MilestoneDraft:
        """Validate ``data`` and store it on the draft at ``index``.

        Title must be 3-50 characters and the due date present and parseable.
        Description and completion note are optional and stored verbatim.

        Raises:
            ValidationError: the draft is left exactly as it was.
        """
        self._check_index(index)
        try:
            parsed = MilestoneInput.model_validate(dict(data))
        except pydantic.ValidationError as exc:
            errors = _field_errors(exc)
            logger.debug("milestone_rejected index=%d errors=%s", index, errors)
            raise ValidationError(errors) from exc

        draft = MilestoneDraft(
            title=parsed.title,
            description=parsed.description,
            completion_note=parsed.completion_note,
            due_at=parsed.due_at,
            starts_at=parsed.starts_at,
            priority=parsed.priority,
            is_valid=True,
            is_editing=False,
        )
        self._drafts[index] = draft
        return draft.model_copy(deep=True)

    def toggle_editing(self, index: int) -> bool:
        self._check_index(index)
        draft = self._drafts[index]
        draft.is_editing = not draft.is_editing
        return draft.is_editing

    def all_valid(self) -> bool:
        return all(draft.is_valid for draft in self._drafts)

    def invalid_indexes(self) -> list[int]:
        return [i for i, draft in enumerate(self._drafts) if not draft.is_valid]

    def clear(self) -> None:
        self._drafts = []

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._drafts):
            raise IndexError(f"No milestone draft at index {index}")
