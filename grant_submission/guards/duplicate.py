"""Duplicate detection for grant and program-application submissions."""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from ..models import ExistingGrant

logger = logging.getLogger(__name__)

RULE_PROGRAM_ID = "program_id"
RULE_COMMUNITY_TITLE = "community_title"


@dataclass(frozen=True)
class DuplicateCandidate:
    community_uid: Optional[str]
    title: Optional[str]
    program_id: Optional[str] = None


@dataclass(frozen=True)
class DuplicateCheckResult:
    is_duplicate: bool
    matched_grant: Optional[ExistingGrant] = None
    rule: Optional[str] = None

    def __bool__(self) -> bool:
        return self.is_duplicate


def base_program_id(program_id: Optional[str]) -> Optional[str]:
    """Strip the ``_<chainId>`` suffix: ``"934_10"`` -> ``"934"``."""
    if not program_id:
        return None
    return program_id.split("_", 1)[0].strip() or None


def normalize_title(title: Optional[str]) -> str:
    return (title or "").strip().lower()


class DuplicateSubmissionGuard:
    """Blocks a second grant for the same program, or same community and title.

    Rules, tried in order:
      1. With a program id: base program ids match (network suffix ignored).
      2. Without: community uid matches AND trimmed, case-folded titles match.

    Read-only; run it again right before the final submission since the
    project's grant list may have changed since the field was filled.
    """

    def check_duplicate(
        self,
        candidate: DuplicateCandidate,
        existing_grants: Iterable[ExistingGrant],
        exclude_uid: Optional[str] = None,
    ) -> DuplicateCheckResult:
        """Evaluate ``candidate`` against a project's known grants.

        Args:
            candidate: What is about to be submitted.
            existing_grants: Snapshot of the project's grants from the indexer.
            exclude_uid: Grant being edited, never counted as its own duplicate.

        Returns:
            DuplicateCheckResult; truthy when a duplicate was found.
        """
        candidate_program = base_program_id(candidate.program_id)
        candidate_title = normalize_title(candidate.title)
        excluded = exclude_uid.lower() if exclude_uid else None

        checked = 0
        for grant in existing_grants:
            if excluded and grant.uid.lower() == excluded:
                continue
            checked += 1
            if candidate_program:
                if base_program_id(grant.program_id) == candidate_program:
                    return self._found(grant, RULE_PROGRAM_ID, candidate)
            elif (
                candidate.community_uid
                and grant.community_uid
                and grant.community_uid.lower() == candidate.community_uid.lower()
                and candidate_title
                and normalize_title(grant.title) == candidate_title
            ):
                return self._found(grant, RULE_COMMUNITY_TITLE, candidate)

        logger.debug("duplicate_check result=clear checked=%d", checked)
        return DuplicateCheckResult(is_duplicate=False)

    def _found(self, grant: ExistingGrant, rule: str, candidate: DuplicateCandidate) -> DuplicateCheckResult:
        logger.info(
            "duplicate_check result=duplicate rule=%s grant=%s program=%s title=%r",
            rule,
            grant.uid,
            candidate.program_id,
            candidate.title,
        )
        return DuplicateCheckResult(is_duplicate=True, matched_grant=grant, rule=rule)
