"""Flow definitions - the one place that branches on Grant vs Program."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..models import FlowType


class WizardStep(str, Enum):
    FLOW_TYPE = "flow_type"
    COMMUNITY = "community"
    DETAILS = "details"
    MILESTONES = "milestones"

    @property
    def label(self) -> str:
        return _STEP_LABELS[self]


_STEP_LABELS = {
    WizardStep.FLOW_TYPE: "Select type",
    WizardStep.COMMUNITY: "Community & program",
    WizardStep.DETAILS: "Details",
    WizardStep.MILESTONES: "Milestones",
}

# Descriptions of program applications carry this marker so an edit can
# recover the flow type from the stored grant.
PROGRAM_APPLICATION_MARKER = "[Funding program application]"

DEFAULT_FUND_USAGE = """| Budget Item    | % of Allocated funding |
| -------- | ------- |
| Item 1  | X%   |
| Item 2 | Y%     |
| Item 3 | Z%     |"""


@dataclass(frozen=True)
class FlowDefinition:
    """Everything that differs between the two wizard variants."""

    flow_type: FlowType
    steps: tuple[WizardStep, ...]
    default_title: str
    success_message: str
    failure_message: str

    @property
    def step_count(self) -> int:
        return len(self.steps)

    def step_at(self, step: int) -> WizardStep:
        if not 1 <= step <= self.step_count:
            raise ValueError(f"{self.flow_type.value} flow has no step {step}")
        return self.steps[step - 1]


FLOWS: dict[FlowType, FlowDefinition] = {
    FlowType.GRANT: FlowDefinition(
        flow_type=FlowType.GRANT,
        steps=(WizardStep.FLOW_TYPE, WizardStep.COMMUNITY, WizardStep.DETAILS, WizardStep.MILESTONES),
        default_title="My Grant",
        success_message="Grant created successfully!",
        failure_message="Grant creation failed. Please try again.",
    ),
    FlowType.PROGRAM: FlowDefinition(
        flow_type=FlowType.PROGRAM,
        steps=(WizardStep.FLOW_TYPE, WizardStep.COMMUNITY, WizardStep.MILESTONES),
        default_title="My Funding Program",
        success_message="Successfully applied to funding program!",
        failure_message="Error applying to funding program. Please try again.",
    ),
}


def get_flow(flow_type: FlowType) -> FlowDefinition:
    return FLOWS[FlowType(flow_type)]


def step_count(flow_type: FlowType) -> int:
    return get_flow(flow_type).step_count


def step_label(flow_type: FlowType, step: int) -> str:
    return get_flow(flow_type).step_at(step).label


def infer_flow_type(description: Optional[str]) -> FlowType:
    """Recover the flow type of a stored grant from its description."""
    if description and PROGRAM_APPLICATION_MARKER in description:
        return FlowType.PROGRAM
    return FlowType.GRANT
