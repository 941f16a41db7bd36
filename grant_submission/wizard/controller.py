"""WizardController - step sequencing, gating and branching for the submission wizard."""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Optional

import pydantic
from pydantic import HttpUrl, TypeAdapter

from ..errors import ValidationError, WizardStateError
from ..models import (
    Community,
    ExistingGrant,
    FlowType,
    FormData,
    FundingProgram,
    GrantSubmissionSession,
    QuestionAnswer,
)
from .flows import DEFAULT_FUND_USAGE, FlowDefinition, WizardStep, get_flow, infer_flow_type
from .form_store import FormDataStore
from .milestones import MilestoneSetEditor

logger = logging.getLogger(__name__)

ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_URL = TypeAdapter(HttpUrl)

DETAIL_FIELDS = {
    "description",
    "amount",
    "proposal_url",
    "recipient",
    "start_date",
    "fund_usage",
    "proof_of_work_url",
}


def _is_url(value: str) -> bool:
    try:
        _URL.validate_python(value)
        return True
    except pydantic.ValidationError:
        return False


class WizardController:
    """Drives one submission wizard from flow selection to the milestones step.

    Use as a context manager so the session is always cleared on teardown::

        with WizardController() as wizard:
            wizard.select_flow_type(FlowType.PROGRAM)
            ...
    """

    def __init__(
        self,
        store: Optional[FormDataStore] = None,
        milestones: Optional[MilestoneSetEditor] = None,
    ) -> None:
        self._store = store or FormDataStore()
        self.milestones = milestones or MilestoneSetEditor()

    @classmethod
    def for_existing_grant(cls, grant: ExistingGrant, network_id: Optional[int] = None) -> "WizardController":
        """Open the wizard on an existing grant, starting at community selection.

        The flow type is recovered from the stored description.
        """
        controller = cls()
        flow_type = infer_flow_type(grant.description)
        form_data = FormData(
            community_uid=grant.community_uid,
            network_id=network_id,
            program_id=grant.program_id,
            title=grant.title,
            description=grant.description,
        )
        controller._store.begin_edit(grant.uid, flow_type, form_data)
        return controller

    def __enter__(self) -> "WizardController":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.reset()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def flow(self) -> FlowDefinition:
        return get_flow(self._store.flow_type)

    @property
    def flow_type(self) -> FlowType:
        return self._store.flow_type

    @property
    def current_step(self) -> int:
        return self._store.current_step

    @property
    def step_count(self) -> int:
        return self.flow.step_count

    @property
    def current_step_kind(self) -> WizardStep:
        return self.flow.step_at(self.current_step)

    @property
    def is_final_step(self) -> bool:
        return self.current_step == self.step_count

    @property
    def form_data(self) -> FormData:
        return self._store.form_data

    @property
    def editing_grant_uid(self) -> Optional[str]:
        return self._store.editing_grant_uid

    @property
    def can_retreat(self) -> bool:
        return self.current_step > self._store.entry_step

    # ------------------------------------------------------------------
    # Field operations
    # ------------------------------------------------------------------
    def select_flow_type(self, flow_type: FlowType) -> None:
        flow_type = FlowType(flow_type)
        if self.current_step != 1:
            raise WizardStateError("Flow type can only be chosen on the first step")
        if flow_type is self.flow_type:
            return
        self._store.set_flow_type(flow_type)
        self._store.update_form_data(program_id=None, title=None)
        self._store.clear_tracks()
        logger.debug("flow_type_selected flow=%s", flow_type.value)

    def select_community(self, community: Community) -> None:
        current = self._store.form_data
        if current.community_uid and current.community_uid != community.uid:
            # programs and tracks belong to the previous community
            self._store.update_form_data(program_id=None)
            self._store.clear_tracks()
        self._store.update_form_data(community_uid=community.uid, network_id=community.network_id)

    def select_program(self, program: FundingProgram) -> None:
        if self._store.form_data.program_id != program.program_id:
            self._store.clear_tracks()
        self._store.update_form_data(program_id=program.program_id, title=program.title or None)

    def set_title(self, title: str) -> None:
        """Free-text title, used when the grant is not tied to a listed program."""
        if self._store.form_data.program_id is not None:
            self._store.clear_tracks()
        self._store.update_form_data(title=title, program_id=None)

    def update_details(self, **fields: Any) -> None:
        unknown = set(fields) - DETAIL_FIELDS
        if unknown:
            raise KeyError(f"Not a details field: {', '.join(sorted(unknown))}")
        try:
            self._store.update_form_data(**fields)
        except pydantic.ValidationError as exc:
            raise ValidationError(
                {".".join(str(p) for p in err["loc"]): err["msg"] for err in exc.errors()}
            ) from exc

    def toggle_track(self, track_id: str) -> bool:
        if not self._store.form_data.program_id:
            raise WizardStateError("Select a funding program before choosing tracks")
        return self._store.toggle_track(track_id)

    def set_questions(self, answers: Iterable[QuestionAnswer]) -> None:
        self._store.update_form_data(questions=list(answers))

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def advance(self) -> int:
        """Validate the current step and move forward.

        Returns:
            The new current step.

        Raises:
            ValidationError: required fields of the current step are missing.
            WizardStateError: already on the last step.
        """
        if self.is_final_step:
            raise WizardStateError("Already on the last step; submit instead")
        step = self.current_step_kind
        errors = self._validate_step(step)
        if errors:
            raise ValidationError(errors)
        if step is WizardStep.DETAILS:
            self._apply_detail_defaults()
        # Program flow has no details step, so the next index is milestones
        self._store.set_current_step(self.current_step + 1)
        logger.debug(
            "wizard_advanced flow=%s step=%d kind=%s",
            self.flow_type.value,
            self.current_step,
            self.current_step_kind.value,
        )
        return self.current_step

    def retreat(self) -> int:
        if not self.can_retreat:
            raise WizardStateError("Cannot go back past the wizard's entry step")
        self._store.set_current_step(self.current_step - 1)
        return self.current_step

    def reset(self) -> None:
        self._store.reset()
        self.milestones.clear()

    # ------------------------------------------------------------------
    # Submission hand-off
    # ------------------------------------------------------------------
    def ensure_submittable(self) -> None:
        if not self.is_final_step:
            raise WizardStateError(f"Submission is only possible from step {self.step_count}")
        invalid = self.milestones.invalid_indexes()
        if invalid:
            raise ValidationError(
                {f"milestones.{i}": "Milestone must be saved before submitting" for i in invalid}
            )

    def snapshot(self) -> GrantSubmissionSession:
        return self._store.snapshot(self.milestones.drafts)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def _validate_step(self, step: WizardStep) -> dict[str, str]:
        data = self._store.form_data
        errors: dict[str, str] = {}
        if step is WizardStep.COMMUNITY:
            if not data.community_uid:
                errors["community_uid"] = "Select a community"
            if not data.program_id and not (data.title or "").strip():
                errors["title"] = "Select a program or enter a title"
        elif step is WizardStep.DETAILS:
            if not (data.description or "").strip():
                errors["description"] = "Description is required"
            if data.proposal_url and not _is_url(data.proposal_url):
                errors["proposal_url"] = "Please enter a valid proposal link"
            if data.proof_of_work_url and not _is_url(data.proof_of_work_url):
                errors["proof_of_work_url"] = "Please enter a valid URL"
            if data.recipient and not ADDRESS_RE.match(data.recipient):
                errors["recipient"] = "Recipient must be a valid address"
        return errors

    def _apply_detail_defaults(self) -> None:
        data = self._store.form_data
        defaults: dict[str, Any] = {}
        if not (data.title or "").strip():
            defaults["title"] = self.flow.default_title
        if self.flow_type is FlowType.GRANT and not data.fund_usage:
            defaults["fund_usage"] = DEFAULT_FUND_USAGE
        if defaults:
            self._store.update_form_data(**defaults)
