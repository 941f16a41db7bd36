"""FormDataStore - session-scoped owner of the wizard's answers."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from ..models import FlowType, FormData, GrantSubmissionSession, MilestoneDraft
from .flows import step_count

logger = logging.getLogger(__name__)


class FormDataStore:
    """Holds one GrantSubmissionSession for the lifetime of a wizard.

    The store is created per wizard and handed to its controller; nothing
    else keeps a reference to it. Readers get copies, never the live model.
    """

    def __init__(self) -> None:
        self._session = GrantSubmissionSession()

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------
    @property
    def flow_type(self) -> FlowType:
        return self._session.flow_type

    @property
    def current_step(self) -> int:
        return self._session.current_step

    @property
    def entry_step(self) -> int:
        return self._session.entry_step

    @property
    def editing_grant_uid(self) -> Optional[str]:
        return self._session.editing_grant_uid

    @property
    def form_data(self) -> FormData:
        return self._session.form_data.model_copy(deep=True)

    def snapshot(self, milestone_drafts: Iterable[MilestoneDraft] = ()) -> GrantSubmissionSession:
        """Deep copy of the session with the given drafts embedded by value."""
        session = self._session.model_copy(deep=True)
        session.milestone_drafts = [draft.model_copy(deep=True) for draft in milestone_drafts]
        return session

    # ------------------------------------------------------------------
    # Mutations (called by WizardController only)
    # ------------------------------------------------------------------
    def set_flow_type(self, flow_type: FlowType) -> None:
        self._session.flow_type = FlowType(flow_type)
        if self._session.current_step > step_count(self._session.flow_type):
            self._session.current_step = 1

    def set_current_step(self, step: int) -> None:
        limit = step_count(self._session.flow_type)
        if not 1 <= step <= limit:
            raise ValueError(f"Step {step} outside 1..{limit} for {self._session.flow_type.value} flow")
        self._session.current_step = step

    def update_form_data(self, **fields: Any) -> FormData:
        """Merge ``fields`` into the form data, re-validating the whole record."""
        unknown = set(fields) - set(FormData.model_fields)
        if unknown:
            raise KeyError(f"Unknown form fields: {', '.join(sorted(unknown))}")
        merged = {**self._session.form_data.model_dump(), **fields}
        self._session.form_data = FormData.model_validate(merged)
        return self.form_data

    def toggle_track(self, track_id: str) -> bool:
        """Add or remove a track id, keeping selection order. Returns True if now selected."""
        tracks = self._session.form_data.selected_track_ids
        if track_id in tracks:
            tracks.remove(track_id)
            return False
        tracks.append(track_id)
        return True

    def clear_tracks(self) -> None:
        self._session.form_data.selected_track_ids = []

    def begin_edit(self, grant_uid: str, flow_type: FlowType, form_data: FormData, entry_step: int = 2) -> None:
        self._session = GrantSubmissionSession(
            flow_type=flow_type,
            current_step=entry_step,
            entry_step=entry_step,
            editing_grant_uid=grant_uid,
            form_data=form_data,
        )
        logger.info("wizard_edit_started grant=%s flow=%s", grant_uid, flow_type.value)

    def reset(self) -> None:
        self._session = GrantSubmissionSession()
