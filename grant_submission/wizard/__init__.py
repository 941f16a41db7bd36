"""Submission wizard: session store, milestone editor and step controller."""

from .controller import WizardController
from .flows import PROGRAM_APPLICATION_MARKER, WizardStep, get_flow, infer_flow_type, step_count, step_label
from .form_store import FormDataStore
from .milestones import MilestoneSetEditor

__all__ = [
    "WizardController",
    "FormDataStore",
    "MilestoneSetEditor",
    "WizardStep",
    "PROGRAM_APPLICATION_MARKER",
    "get_flow",
    "infer_flow_type",
    "step_count",
    "step_label",
]
