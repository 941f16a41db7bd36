"""Tests for the operator CLI."""

from unittest.mock import MagicMock, patch

import pytest

from grant_submission.main import load_candidate, main
from grant_submission.models import ExistingGrant

PROJECT = "0xproject"


@pytest.fixture
def config():
    return MagicMock(
        log_level="INFO",
        indexer_url="https://indexer.test",
        indexer_poll_max_attempts=3,
        indexer_poll_interval_seconds=0.0,
    )


@pytest.fixture
def cli(config, indexer):
    with patch("grant_submission.main.load_config", return_value=config), \
         patch("grant_submission.main.IndexerClient") as mock_cls:
        mock_cls.from_config.return_value = indexer
        yield main


def test_load_candidate(tmp_path):
    path = tmp_path / "candidate.yaml"
    path.write_text("community: C1\ntitle: Ecosystem Fund\nprogramId: 'P1_42'\n")

    candidate = load_candidate(path)

    assert candidate.community_uid == "C1"
    assert candidate.title == "Ecosystem Fund"
    assert candidate.program_id == "P1_42"


def test_load_candidate_rejects_non_mapping(tmp_path):
    path = tmp_path / "candidate.yaml"
    path.write_text("- C1\n- title\n")
    with pytest.raises(ValueError):
        load_candidate(path)


def test_check_duplicate_exit_codes(cli, indexer, tmp_path):
    indexer.add_grant(PROJECT, ExistingGrant(uid="0xg1", community_uid="C1", title="Ecosystem Fund"))
    duplicate = tmp_path / "dup.yaml"
    duplicate.write_text("community: C1\ntitle: '  ecosystem fund '\n")
    fresh = tmp_path / "fresh.yaml"
    fresh.write_text("community: C1\ntitle: Builders Round\n")

    assert cli(["check-duplicate", "--project", PROJECT, "--candidate", str(duplicate)]) == 1
    assert cli(["check-duplicate", "--project", PROJECT, "--candidate", str(fresh)]) == 0


def test_await_record_exit_codes(cli, indexer):
    indexer.add_grant(PROJECT, ExistingGrant(uid="0xg1"))

    assert cli(["await-record", "--project", PROJECT, "--record", "0xg1", "--network", "10", "--tx", "0xtx"]) == 0
    assert indexer.notified == [("0xtx", 10)]
    assert cli(["await-record", "--project", PROJECT, "--record", "0xmissing", "--network", "10"]) == 2
    assert indexer.fetch_calls == 1 + 3
