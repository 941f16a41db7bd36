"""Async client for the indexer API (read side, transaction hints, track assignment)."""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from ..errors import IndexerError, IndexerRetryableError
from ..models import Community, ExistingGrant, FundingProgram, ProjectRecordSet, Track
from . import routes

logger = logging.getLogger(__name__)

# 10s connect, 30s read
INDEXER_TIMEOUT = httpx.Timeout(connect=10.0, read=30.0, write=10.0, pool=10.0)


class IndexerClient:
    """Thin httpx wrapper: 3 attempts with exponential backoff on 429 / 5xx / transport errors.

    4xx responses other than 429 raise IndexerError immediately.
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[httpx.Timeout] = None,
        retry_wait: Optional[wait_base] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize client.

        Args:
            base_url: Indexer root URL, e.g. https://gapapi.karmahq.xyz
            timeout: Per-request timeout, defaults to INDEXER_TIMEOUT
            retry_wait: tenacity wait strategy between attempts
            http_client: Shared AsyncClient; a short-lived one is opened per request otherwise
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout or INDEXER_TIMEOUT
        self.retry_wait = retry_wait or wait_exponential(multiplier=1, min=1, max=10)
        self._http = http_client

    @classmethod
    def from_config(cls, config: Any) -> "IndexerClient":
        return cls(config.indexer_url, timeout=httpx.Timeout(config.indexer_timeout_seconds))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    async def fetch_project_records(self, project_uid: str, retry: bool = True) -> ProjectRecordSet:
        """Read the project's grants. ``retry=False`` sends exactly one request."""
        data = await self._request("GET", routes.project_grants(project_uid), retry=retry)
        if isinstance(data, dict):
            data = data.get("grants", data.get("data", []))
        if not isinstance(data, list):
            raise IndexerError(f"Unexpected grants payload for project {project_uid}")
        grants = [ExistingGrant.from_indexer(item) for item in data if item.get("uid")]
        return ProjectRecordSet(project_uid=project_uid, grants=grants)

    async def notify_transaction(self, tx_hash: str, network_id: int) -> None:
        """Hint the indexer to pick up ``tx_hash`` now instead of on its next sweep."""
        await self._request("POST", routes.attestation_listener(tx_hash, network_id), json={})

    async def assign_tracks(self, project_uid: str, track_ids: list[str], program_id: str) -> None:
        await self._request(
            "POST",
            routes.project_tracks(project_uid),
            json={"trackIds": list(track_ids), "programId": program_id},
        )

    async def get_community(self, community_uid: str) -> Community:
        data = await self._request("GET", routes.community(community_uid))
        return Community.from_indexer(data)

    async def list_programs(self, community_uid: str) -> list[FundingProgram]:
        data = await self._request("GET", routes.community_programs(community_uid))
        if isinstance(data, dict):
            data = data.get("programs", data.get("data", []))
        return [FundingProgram.from_indexer(item) for item in data or []]

    async def list_program_tracks(self, program_id: str) -> list[Track]:
        data = await self._request("GET", routes.program_tracks(program_id))
        return [Track.from_indexer(item) for item in data or []]

    # ------------------------------------------------------------------
    # Retry-wrapped HTTP
    # ------------------------------------------------------------------
    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(3),
            wait=self.retry_wait,
            retry=retry_if_exception_type((IndexerRetryableError, httpx.TransportError)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    async def _request(self, method: str, path: str, json: Optional[dict] = None, retry: bool = True) -> Any:
        if not retry:
            return await self._send(method, path, json)
        async for attempt in self._retrying():
            with attempt:
                return await self._send(method, path, json)

    async def _send(self, method: str, path: str, json: Optional[dict]) -> Any:
        url = f"{self.base_url}{path}"
        start = time.monotonic()
        status_code = None
        try:
            if self._http is not None:
                response = await self._http.request(method, url, json=json, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.request(method, url, json=json)
            status_code = response.status_code
        except httpx.TransportError as exc:
            logger.error(
                "indexer_request method=%s url=%s status=transport_error duration_ms=%.0f result=failure error=%s",
                method, url, (time.monotonic() - start) * 1000, exc,
            )
            raise

        duration_ms = (time.monotonic() - start) * 1000
        if status_code == 429 or status_code >= 500:
            logger.warning(
                "indexer_request method=%s url=%s status=%d duration_ms=%.0f result=retry",
                method, url, status_code, duration_ms,
            )
            raise IndexerRetryableError(
                f"Indexer returned {status_code}: {response.text[:200]}", status_code=status_code
            )
        if status_code >= 400:
            logger.error(
                "indexer_request method=%s url=%s status=%d duration_ms=%.0f result=failure",
                method, url, status_code, duration_ms,
            )
            raise IndexerError(f"Indexer returned {status_code} for {path}", status_code=status_code)

        logger.debug(
            "indexer_request method=%s url=%s status=%d duration_ms=%.0f result=success",
            method, url, status_code, duration_ms,
        )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise IndexerError(f"Malformed JSON from {path}", status_code=status_code) from exc
