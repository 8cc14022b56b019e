"""Client for the supplier search automation webhook."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

import httpx
from pydantic import ValidationError

from ops_dashboard.schemas import MaterialSearchResponse, MaterialSearchResult
from ops_dashboard.utils.http import RetryConfig, request_with_retry

logger = logging.getLogger(__name__)


class MaterialSearchError(Exception):
    """Raised when the webhook is unreachable or answers with an error."""


class MaterialSearchClient:
    """Forward a free-text material query to the workflow and normalize its answer."""

    def __init__(
        self,
        *,
        webhook_url: str,
        timeout: float = 60.0,
        retry_config: RetryConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._webhook_url = webhook_url
        self._timeout = timeout
        self._retry_config = retry_config or RetryConfig()
        self._transport = transport

    async def search(self, query: str) -> MaterialSearchResponse:
        query = query.strip()
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            try:
                response = await request_with_retry(
                    client.post,
                    self._webhook_url,
                    json={"query": query},
                    retry_config=self._retry_config,
                )
            except httpx.HTTPError as exc:
                logger.warning("Material search webhook failed: %s", exc)
                raise MaterialSearchError("Supplier search failed.") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise MaterialSearchError("Supplier search returned invalid JSON.") from exc
        if not isinstance(payload, dict):
            raise MaterialSearchError("Supplier search returned an unexpected payload.")

        payload = dict(payload)
        payload["results"] = self._parse_results(payload.get("results"))
        payload.setdefault("query_original", query)
        try:
            return MaterialSearchResponse.model_validate(_clean(payload))
        except ValidationError as exc:
            raise MaterialSearchError("Supplier search returned an unexpected payload.") from exc

    @staticmethod
    def _parse_results(raw: Any) -> List[MaterialSearchResult]:
        """Results may arrive as a list or as a JSON-encoded string of one."""
        if isinstance(raw, str):
            try:
                raw = json.loads(raw)
            except ValueError:
                logger.error("Failed to parse material search results")
                return []
        if not isinstance(raw, list):
            return []

        results: List[MaterialSearchResult] = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            try:
                results.append(MaterialSearchResult(**_clean(item)))
            except ValidationError:
                logger.warning("Skipping malformed material search result: %s", item)
        return results


def _clean(item: Dict[str, Any]) -> Dict[str, Any]:
    # The workflow emits null for missing text fields.
    return {
        key: value
        for key, value in item.items()
        if value is not None or key == "image"
    }


__all__ = ["MaterialSearchClient", "MaterialSearchError"]
