"""Tests for the error reporters.

Mocks are used here in tests only; production code uses real Supabase calls.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest

from grant_submission.reporting import LoggingErrorReporter, SupabaseErrorReporter, build_error_reporter


@pytest.fixture
def mock_supabase():
    """Patch create_client so no real network call is made."""
    with patch("grant_submission.reporting.error_reporter.create_client") as mock_create:
        mock_client = MagicMock()
        mock_create.return_value = mock_client
        reporter = SupabaseErrorReporter(url="https://fake.supabase.co", key="fake-key")
        yield reporter, mock_client, mock_create


def _raise_and_catch():
    try:
        raise RuntimeError("rpc unavailable")
    except RuntimeError as exc:
        return exc


def test_supabase_reporter_inserts_record(mock_supabase):
    reporter, mock_client, mock_create = mock_supabase

    reporter.report("Error creating grant to project 0xp", _raise_and_catch(), {"network_id": 10})

    mock_create.assert_called_once_with("https://fake.supabase.co", "fake-key")
    mock_client.table.assert_called_once_with("submission_errors")
    record = mock_client.table.return_value.insert.call_args[0][0]
    assert record["message"] == "Error creating grant to project 0xp"
    assert record["error_type"] == "RuntimeError"
    assert record["error_message"] == "rpc unavailable"
    assert "Traceback" in record["stack"]
    assert record["context"] == {"network_id": 10}
    mock_client.table.return_value.insert.return_value.execute.assert_called_once()


def test_supabase_failure_falls_back_to_log(mock_supabase, caplog):
    reporter, mock_client, _ = mock_supabase
    mock_client.table.return_value.insert.return_value.execute.side_effect = Exception("DB down")

    with caplog.at_level(logging.WARNING):
        reporter.report("Error creating grant to project 0xp", _raise_and_catch(), {"address": "0xme"})

    assert "Could not persist error report" in caplog.text
    assert '"address": "0xme"' in caplog.text


def test_logging_reporter_serializes_context(caplog):
    with caplog.at_level(logging.ERROR):
        LoggingErrorReporter().report("Track assignment failed", None, {"track_ids": ["t1"], "network_id": 10})

    assert 'context={"network_id": 10, "track_ids": ["t1"]}' in caplog.text


def test_build_error_reporter_selects_backend():
    config = MagicMock(error_tracking_enabled=False)
    assert isinstance(build_error_reporter(config), LoggingErrorReporter)

    config = MagicMock(error_tracking_enabled=True, supabase_url="https://fake.supabase.co", supabase_key="k")
    with patch("grant_submission.reporting.error_reporter.create_client") as mock_create:
        reporter = build_error_reporter(config)
    assert isinstance(reporter, SupabaseErrorReporter)
    mock_create.assert_called_once_with("https://fake.supabase.co", "k")
