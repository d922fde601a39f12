"""
Places client — wraps the Google Places web service used as photo provider.

Three calls are used:
  textsearch  free-text query        → place_id
  details     place_id               → photo references
  photo       photo reference        → fetchable image URL (redirect target)

requests is blocking, so every public method runs in a worker thread.
Transient failures (network, timeout, HTTP 5xx, UNKNOWN_ERROR) are retried
with exponential backoff up to `max_attempts`, then raised. Quota and
request errors are raised immediately.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import requests
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

_REDIRECT_CODES = (301, 302, 303, 307, 308)


class PlacesError(Exception):
    """Base class for photo-provider failures."""


class PlacesConfigError(PlacesError):
    """Raised when the client is built without credentials."""


class PlacesNotFoundError(PlacesError):
    """The place id is unknown to the provider (stale or deleted listing)."""


class PlacesQuotaError(PlacesError):
    """Daily quota exhausted or request rate exceeded."""


class PlacesTransientError(PlacesError):
    """Network failure, timeout or provider-side error; safe to retry."""


class PlacesClient:
    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://maps.googleapis.com/maps/api/place",
        timeout: float = 10.0,
        max_attempts: int = 3,
        backoff_seconds: float = 1.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not api_key:
            raise PlacesConfigError("GOOGLE_PLACES_API_KEY is not set")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._max_attempts = max_attempts
        self._backoff_seconds = backoff_seconds
        self._session = session or requests.Session()

    # ── Public API ───────────────────────────────────────────────────────────

    async def find_place_id(self, query: str) -> Optional[str]:
        """Return the best-matching place id for a free-text query, or None."""
        return await asyncio.to_thread(self._find_place_id, query)

    async def get_photo_references(self, place_id: str, limit: Optional[int] = None) -> list[str]:
        """Return photo references for a place (possibly empty)."""
        refs = await asyncio.to_thread(self._get_photo_references, place_id)
        return refs[:limit] if limit is not None else refs

    async def resolve_photo_url(self, reference: str, max_width: int = 800) -> str:
        """Resolve a photo reference to the image URL it redirects to."""
        return await asyncio.to_thread(self._resolve_photo_url, reference, max_width)

    def close(self) -> None:
        self._session.close()

    # ── Blocking implementation ──────────────────────────────────────────────

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=self._backoff_seconds, max=30),
            retry=retry_if_exception_type(PlacesTransientError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    def _send(self, endpoint: str, params: dict[str, Any], **kwargs: Any) -> requests.Response:
        url = f"{self._base_url}/{endpoint}"
        try:
            response = self._session.get(
                url, params={**params, "key": self._api_key}, timeout=self._timeout, **kwargs
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            raise PlacesTransientError(f"{endpoint}: {exc.__class__.__name__}") from exc

        if response.status_code == 429:
            raise PlacesQuotaError(f"{endpoint}: HTTP 429")
        if response.status_code >= 500:
            raise PlacesTransientError(f"{endpoint}: HTTP {response.status_code}")
        if response.status_code >= 400:
            raise PlacesError(f"{endpoint}: HTTP {response.status_code}")
        return response

    def _get_json(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        response = self._send(endpoint, params)
        try:
            payload = response.json()
        except ValueError as exc:
            raise PlacesError(f"{endpoint}: invalid JSON response") from exc

        status = payload.get("status", "OK")
        if status in ("OK", "ZERO_RESULTS"):
            return payload
        if status == "NOT_FOUND":
            raise PlacesNotFoundError(f"{endpoint}: NOT_FOUND")
        if status == "OVER_QUERY_LIMIT":
            raise PlacesQuotaError(f"{endpoint}: OVER_QUERY_LIMIT")
        if status == "UNKNOWN_ERROR":
            raise PlacesTransientError(f"{endpoint}: UNKNOWN_ERROR")
        raise PlacesError(f"{endpoint}: {status} {payload.get('error_message', '')}".strip())

    def _find_place_id(self, query: str) -> Optional[str]:
        payload = self._retrying()(self._get_json, "textsearch/json", {"query": query})
        results = payload.get("results") or []
        if not results:
            return None
        return results[0].get("place_id")

    def _get_photo_references(self, place_id: str) -> list[str]:
        payload = self._retrying()(
            self._get_json, "details/json", {"place_id": place_id, "fields": "photos"}
        )
        photos = (payload.get("result") or {}).get("photos") or []
        return [p["photo_reference"] for p in photos if p.get("photo_reference")]

    def _resolve_photo_url(self, reference: str, max_width: int) -> str:
        response = self._retrying()(
            self._send,
            "photo",
            {"maxwidth": max_width, "photo_reference": reference},
            allow_redirects=False,
        )
        location = response.headers.get("Location")
        if response.status_code in _REDIRECT_CODES and location:
            return location
        raise PlacesError(f"photo: no redirect for reference (HTTP {response.status_code})")
