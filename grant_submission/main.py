"""Operator CLI for the submission workflow.

Commands:
- check-duplicate: run the duplicate guard for a candidate against a project
- await-record: poll the indexer until a broadcast grant becomes visible
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import yaml

from .config import Config, load_config
from .guards import DuplicateCandidate, DuplicateSubmissionGuard
from .indexer import IndexerClient, IndexerConfirmationPoller

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def load_candidate(path: Path) -> DuplicateCandidate:
    """Read ``community`` / ``title`` / ``programId`` from a YAML file."""
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a mapping")
    program_id = raw.get("programId", raw.get("program_id"))
    return DuplicateCandidate(
        community_uid=raw.get("community", raw.get("community_uid")),
        title=raw.get("title"),
        program_id=str(program_id) if program_id is not None else None,
    )


async def check_duplicate(config: Config, project_uid: str, candidate_path: Path) -> int:
    indexer = IndexerClient.from_config(config)
    candidate = load_candidate(candidate_path)

    records = await indexer.fetch_project_records(project_uid)
    result = DuplicateSubmissionGuard().check_duplicate(candidate, records.grants)
    if result:
        logger.warning("Duplicate of grant %s (rule=%s)", result.matched_grant.uid, result.rule)
        return 1
    logger.info("No duplicate among %d grants on project %s", len(records.grants), project_uid)
    return 0


async def await_record(
    config: Config, project_uid: str, record_uid: str, network_id: int, tx_hash: Optional[str]
) -> int:
    indexer = IndexerClient.from_config(config)
    poller = IndexerConfirmationPoller(
        indexer,
        max_attempts=config.indexer_poll_max_attempts,
        interval_seconds=config.indexer_poll_interval_seconds,
    )
    result = await poller.wait_for_record(record_uid, project_uid, network_id, tx_hash=tx_hash)
    return 0 if result.confirmed else 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="grant-submission")
    sub = parser.add_subparsers(dest="command", required=True)

    dup = sub.add_parser("check-duplicate", help="Check a candidate grant against a project")
    dup.add_argument("--project", required=True)
    dup.add_argument("--candidate", required=True, type=Path, help="YAML with community/title/programId")

    wait = sub.add_parser("await-record", help="Poll until a grant attestation is indexed")
    wait.add_argument("--project", required=True)
    wait.add_argument("--record", required=True)
    wait.add_argument("--network", required=True, type=int)
    wait.add_argument("--tx")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config()
    logging.getLogger().setLevel(config.log_level)
    if args.command == "check-duplicate":
        return asyncio.run(check_duplicate(config, args.project, args.candidate))
    return asyncio.run(await_record(config, args.project, args.record, args.network, args.tx))


if __name__ == "__main__":
    sys.exit(main())
