"""Error-tracking collaborators for failed submissions."""

from __future__ import annotations

import json
import logging
import os
import traceback
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from supabase import Client, create_client

logger = logging.getLogger(__name__)


class ErrorReporter(ABC):
    @abstractmethod
    def report(self, message: str, error: Optional[BaseException], context: Mapping[str, Any]) -> None:
        """Record a system failure. Must not raise."""
        pass


class LoggingErrorReporter(ErrorReporter):
    """Reports to the log only (default when Supabase is not configured)."""

    def report(self, message: str, error: Optional[BaseException], context: Mapping[str, Any]) -> None:
        logger.error(
            "%s context=%s error=%s",
            message,
            json.dumps(dict(context), default=str, sort_keys=True),
            error,
            exc_info=error,
        )


class SupabaseErrorReporter(ErrorReporter):
    """Persists reports to the ``submission_errors`` table, falling back to logging."""

    TABLE = "submission_errors"

    def __init__(
        self,
        url: Optional[str] = None,
        key: Optional[str] = None,
        client: Optional[Client] = None,
    ) -> None:
        """Initialize from explicit args or env vars.

        Args:
            url: Supabase project URL (falls back to SUPABASE_URL env var).
            key: Supabase service key (falls back to SUPABASE_KEY env var).
            client: Pre-built supabase Client, mainly for tests.
        """
        if client is None:
            client = create_client(url or os.environ["SUPABASE_URL"], key or os.environ["SUPABASE_KEY"])
        self._client = client
        self._fallback = LoggingErrorReporter()

    def report(self, message: str, error: Optional[BaseException], context: Mapping[str, Any]) -> None:
        record = {
            "message": message[:1000],
            "error_type": type(error).__name__ if error else None,
            "error_message": str(error)[:1000] if error else None,
            "stack": "".join(traceback.format_exception(error))[:5000] if error else None,
            "context": json.loads(json.dumps(dict(context), default=str)),
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            self._client.table(self.TABLE).insert(record).execute()
        except Exception as exc:
            logger.warning("Could not persist error report: %s", exc)
            self._fallback.report(message, error, context)


def build_error_reporter(config: Any) -> ErrorReporter:
    """Supabase-backed reporter when credentials are configured, logging otherwise."""
    if getattr(config, "error_tracking_enabled", False):
        return SupabaseErrorReporter(url=config.supabase_url, key=config.supabase_key)
    return LoggingErrorReporter()
