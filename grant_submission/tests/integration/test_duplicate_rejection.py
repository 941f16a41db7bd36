"""Integration: duplicates are refused before anything is signed."""

import pytest

from grant_submission.errors import DuplicateDetected
from grant_submission.models import ExistingGrant, FlowType
from grant_submission.wizard import WizardController


@pytest.mark.asyncio
async def test_program_applied_on_other_network_is_refused(
    workflow, wallet, indexer, submitter_context, community, program
):
    indexer.add_grant(
        submitter_context.project_uid,
        ExistingGrant(uid="0xold", community_uid="C9", title="Retro Funding", program_id="P1_42161"),
    )
    wizard = WizardController()
    wizard.select_flow_type(FlowType.PROGRAM)
    wizard.advance()
    wizard.select_community(community)
    wizard.select_program(program)
    wizard.advance()

    with pytest.raises(DuplicateDetected):
        await workflow.submit(wizard, submitter_context)

    assert wallet.signed == []
    assert wizard.form_data.program_id == "P1_10"


@pytest.mark.asyncio
async def test_grant_added_after_wizard_opened_is_caught(workflow, wallet, indexer, submitter_context, community):
    wizard = WizardController()
    wizard.advance()
    wizard.select_community(community)
    wizard.set_title("Ecosystem Fund")

    early = await workflow.check_duplicate(wizard, submitter_context.project_uid)
    assert not early

    wizard.advance()
    wizard.update_details(description="Tooling")
    wizard.advance()
    indexer.add_grant(
        submitter_context.project_uid,
        ExistingGrant(uid="0xnew", community_uid="C1", title="  ecosystem fund "),
    )

    with pytest.raises(DuplicateDetected):
        await workflow.submit(wizard, submitter_context)
    assert wallet.signed == []
