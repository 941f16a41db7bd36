"""Tests for DuplicateSubmissionGuard."""

import pytest

from grant_submission.guards import DuplicateCandidate, DuplicateSubmissionGuard, base_program_id
from grant_submission.guards.duplicate import RULE_COMMUNITY_TITLE, RULE_PROGRAM_ID
from grant_submission.models import ExistingGrant


@pytest.fixture
def guard():
    return DuplicateSubmissionGuard()


@pytest.mark.parametrize(
    "program_id, expected",
    [("934_10", "934"), ("934", "934"), ("P1_42_extra", "P1"), (None, None), ("", None)],
)
def test_base_program_id(program_id, expected):
    assert base_program_id(program_id) == expected


def test_same_program_on_other_network_is_duplicate(guard):
    existing = [ExistingGrant(uid="0xg1", community_uid="C9", title="Anything", program_id="P1_10")]
    candidate = DuplicateCandidate(community_uid="C1", title="Other", program_id="P1_42")

    result = guard.check_duplicate(candidate, existing)

    assert result
    assert result.rule == RULE_PROGRAM_ID
    assert result.matched_grant.uid == "0xg1"


def test_different_program_is_not_duplicate(guard):
    existing = [ExistingGrant(uid="0xg1", community_uid="C1", title="Ecosystem Fund", program_id="P2_10")]
    candidate = DuplicateCandidate(community_uid="C1", title="Ecosystem Fund", program_id="P1_10")

    assert not guard.check_duplicate(candidate, existing)


def test_title_match_is_trimmed_and_case_insensitive(guard):
    existing = [ExistingGrant(uid="0xg1", community_uid="C1", title="Ecosystem Fund")]
    candidate = DuplicateCandidate(community_uid="C1", title="  ecosystem fund ")

    result = guard.check_duplicate(candidate, existing)

    assert result.is_duplicate
    assert result.rule == RULE_COMMUNITY_TITLE


def test_title_match_requires_same_community(guard):
    existing = [ExistingGrant(uid="0xg1", community_uid="C2", title="Ecosystem Fund")]
    candidate = DuplicateCandidate(community_uid="C1", title="Ecosystem Fund")

    assert not guard.check_duplicate(candidate, existing)


def test_empty_project_is_clear(guard):
    result = guard.check_duplicate(DuplicateCandidate(community_uid="C1", title="My Grant"), [])
    assert result.is_duplicate is False
    assert result.matched_grant is None


def test_grant_being_edited_is_excluded(guard):
    existing = [ExistingGrant(uid="0xABC", community_uid="C1", title="Infra", program_id="P1_10")]
    candidate = DuplicateCandidate(community_uid="C1", title="Infra", program_id="P1_10")

    assert not guard.check_duplicate(candidate, existing, exclude_uid="0xabc")
    assert guard.check_duplicate(candidate, existing)
