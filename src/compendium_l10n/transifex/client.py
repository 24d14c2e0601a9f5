"""
Async HTTP client for the Transifex REST API (v3, JSON:API).

The client covers the handful of calls the tool needs:

    - paginated listing of resource strings (``links.next`` chaining)
    - PATCHing the tags of one resource string
    - the asynchronous translation download: submit a job, poll it until
      it reaches a terminal state, return the file content

It must be used as an async context manager so the underlying connection
pool is closed:

    async with TransifexClient(settings) as client:
        data = await client.download_translation(settings.resource_id("spells"))

Job polling
-----------
Transifex answers a poll with the job object while the job is
``pending``/``processing``, with the job object and an ``errors`` list when
it ``failed``, and with a redirect to the translated file once it is done.
Redirects are followed, so any response that is not a pending or failed
job object *is* the result.  Polling gives up after
``poll_timeout_seconds`` with :exc:`TranslationJobTimeoutError`.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from compendium_l10n.config import TransifexSettings
from compendium_l10n.errors import (
    TranslationJobError,
    TranslationJobTimeoutError,
    TranslationServiceError,
)

logger = logging.getLogger(__name__)

JSONAPI_CONTENT_TYPE = "application/vnd.api+json"

_NON_TERMINAL = frozenset({"pending", "processing"})


# =============================================================================
# JOB STATE
# =============================================================================


@dataclass
class JobState:
    """
    Outcome of one poll of a download job.

    Attributes:
        status: "pending", "processing", "failed" or "completed".
        result: The downloaded file content when completed (parsed JSON,
                or raw text if the file is not JSON).
        errors: "<code>: <detail>" strings reported by a failed job.
    """

    status: str
    result: Any = None
    errors: list[str] = field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        return self.status not in _NON_TERMINAL

    @classmethod
    def from_response(cls, payload: Any) -> JobState:
        attributes = {}
        if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
            attributes = payload["data"].get("attributes") or {}
        status = attributes.get("status")
        if status in _NON_TERMINAL:
            return cls(status=status)
        if status == "failed":
            errors = [f"{e.get('code')}: {e.get('detail')}" for e in attributes.get("errors") or []]
            return cls(status="failed", errors=errors)
        return cls(status="completed", result=payload)


# =============================================================================
# API CLIENT
# =============================================================================


@dataclass
class TransifexClient:
    """
    Async client for the Transifex API.

    Attributes:
        settings: Transifex section of the extractor configuration.
    """

    settings: TransifexSettings

    _http_client: httpx.AsyncClient | None = field(default=None, repr=False)

    # -------------------------------------------------------------------------
    # Context Manager Protocol
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> TransifexClient:
        self._http_client = httpx.AsyncClient(
            base_url=self.settings.api_url,
            headers={"Authorization": f"Bearer {self.settings.token}"},
            timeout=30.0,
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    @property
    def http_client(self) -> httpx.AsyncClient:
        """
        The underlying httpx.AsyncClient.

        Raises:
            RuntimeError: If accessed outside of async context manager.
        """
        if self._http_client is None:
            raise RuntimeError(
                "TransifexClient must be used as an async context manager. "
                "Use 'async with TransifexClient(settings) as client:'"
            )
        return self._http_client

    # -------------------------------------------------------------------------
    # Raw requests
    # -------------------------------------------------------------------------

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send a request and decode the body.

        Returns parsed JSON, or the raw text when the body is not JSON
        (translated files are not always valid JSON).

        Raises:
            TranslationServiceError: On connection failure or non-2xx status.
        """
        try:
            response = await self.http_client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise TranslationServiceError(
                f"{method} {url} failed: {e}", status_code=0, url=url
            ) from e

        if response.is_error:
            raise TranslationServiceError(
                f"{method} {url} returned {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
                url=url,
            )

        try:
            return response.json()
        except ValueError:
            logger.warning("Non-JSON response from %s, returning raw text", url)
            return response.text

    async def get(self, url: str, params: dict[str, Any] | None = None) -> Any:
        return await self._request("GET", url, params=params)

    async def get_all(self, url: str, params: dict[str, Any] | None = None) -> list[dict]:
        """Collect ``data`` across every page, following ``links.next``."""
        items: list[dict] = []
        page = await self.get(url, params)
        while True:
            if not isinstance(page, dict):
                raise TranslationServiceError(f"unexpected listing page from {url}", url=url)
            items.extend(page.get("data", []))
            next_url = (page.get("links") or {}).get("next")
            if not next_url:
                return items
            page = await self.get(next_url)

    async def _send_document(self, method: str, url: str, body: dict) -> Any:
        return await self._request(
            method,
            url,
            content=json.dumps(body),
            headers={"Content-Type": JSONAPI_CONTENT_TYPE},
        )

    async def post(self, url: str, body: dict) -> Any:
        return await self._send_document("POST", url, body)

    async def patch(self, url: str, body: dict) -> Any:
        return await self._send_document("PATCH", url, body)

    # -------------------------------------------------------------------------
    # Resource strings
    # -------------------------------------------------------------------------

    async def list_resource_strings(
        self, resource_id: str, *, tags_all: str | None = "untagged", limit: int = 1000
    ) -> list[dict]:
        """Every source string of a resource, optionally filtered by tag."""
        params: dict[str, Any] = {"filter[resource]": resource_id, "limit": limit}
        if tags_all:
            params["filter[tags][all]"] = tags_all
        return await self.get_all("/resource_strings", params)

    async def patch_string_tags(self, string_id: str, tags: list[str]) -> Any:
        """Replace the tags of one resource string."""
        return await self.patch(
            f"/resource_strings/{string_id}",
            {
                "data": {
                    "attributes": {"tags": tags},
                    "id": string_id,
                    "type": "resource_strings",
                }
            },
        )

    # -------------------------------------------------------------------------
    # Translation download
    # -------------------------------------------------------------------------

    async def submit_download_job(self, resource_id: str, language_id: str | None = None) -> str:
        """Start an async translation download; return the job URL."""
        data = await self.post(
            "/resource_translations_async_downloads",
            {
                "data": {
                    "attributes": {"content_encoding": "text"},
                    "relationships": {
                        "language": {
                            "data": {
                                "id": language_id or self.settings.language_id,
                                "type": "languages",
                            }
                        },
                        "resource": {"data": {"id": resource_id, "type": "resources"}},
                    },
                    "type": "resource_translations_async_downloads",
                }
            },
        )
        try:
            return data["data"]["links"]["self"]
        except (KeyError, TypeError) as e:
            raise TranslationServiceError(
                f"download job for {resource_id} returned no job link",
                url="/resource_translations_async_downloads",
            ) from e

    async def poll_job(self, job_url: str) -> JobState:
        return JobState.from_response(await self.get(job_url))

    async def download_translation(self, resource_id: str, language_id: str | None = None) -> Any:
        """Submit a download job and wait for its result.

        Raises:
            TranslationJobError:        The job reported ``failed``.
            TranslationJobTimeoutError: No terminal state within
                                        ``poll_timeout_seconds``.
            TranslationServiceError:    Any HTTP failure.
        """
        job_url = await self.submit_download_job(resource_id, language_id)
        deadline = time.monotonic() + self.settings.poll_timeout_seconds

        while True:
            state = await self.poll_job(job_url)
            if state.status == "failed":
                raise TranslationJobError(
                    ", ".join(state.errors) or "generic error",
                    resource_id=resource_id,
                    job_url=job_url,
                )
            if state.is_terminal:
                return state.result
            if time.monotonic() >= deadline:
                raise TranslationJobTimeoutError(
                    f"job still {state.status} after {self.settings.poll_timeout_seconds:.0f}s",
                    resource_id=resource_id,
                    job_url=job_url,
                )
            await asyncio.sleep(self.settings.poll_interval_seconds)
