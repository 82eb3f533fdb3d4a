"""HTTP client for the career endpoints of the recruiter backend."""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from career_draft.errors import SubmissionError

logger = logging.getLogger(__name__)


class CareerApiClient:
    """Posts flattened career payloads to ``/api/add-career`` and ``/api/update-career``."""

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout_s: float = 20.0,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout_s
        self._token = token if token is not None else os.getenv("CAREER_API_TOKEN")
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                resp = await client.post(path, json=payload, headers=self._headers())
                resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("POST %s returned %s", path, exc.response.status_code)
            raise SubmissionError(
                f"{path} returned {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("POST %s failed: %s", path, exc)
            raise SubmissionError(f"{path} failed: {exc}") from exc

        if not resp.content:
            return {}
        try:
            body = resp.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {"result": body}

    async def create_career(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._post("/api/add-career", payload)

    async def update_career(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._post("/api/update-career", payload)
