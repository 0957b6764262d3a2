from __future__ import annotations

import logging

import httpx

from src.services.errors import ImageSearchError, NetworkTimeoutError

logger = logging.getLogger(__name__)

SUBSCRIPTION_KEY_HEADER = "Ocp-Apim-Subscription-Key"


class BingImageSearchClient:
    def __init__(
        self,
        api_key: str,
        endpoint: str = "https://api.bing.microsoft.com/v7.0/images/search",
        size: str = "medium",
        timeout_seconds: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.api_key = api_key
        self.endpoint = endpoint
        self.size = size
        self.timeout_seconds = timeout_seconds
        self._http = http_client or httpx.Client(timeout=timeout_seconds)

    def first_image_url(self, query: str) -> str:
        """Returns the content URL of the first hit, or "" when there are no results."""
        try:
            response = self._http.get(
                self.endpoint,
                headers={SUBSCRIPTION_KEY_HEADER: self.api_key},
                params={"q": query, "size": self.size},
                timeout=self.timeout_seconds,
            )
        except httpx.TimeoutException as timeout_error:
            raise NetworkTimeoutError(self.endpoint, self.timeout_seconds) from timeout_error
        except httpx.HTTPError as http_error:
            raise ImageSearchError(f"Connection error to image search: {http_error}") from http_error

        if response.status_code != 200:
            logger.error("Image search returned status=%d for query=%r", response.status_code, query)
            raise ImageSearchError(
                f"Image search error {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as json_error:
            raise ImageSearchError(f"Image search returned invalid JSON: {json_error}") from json_error

        hits = body.get("value") if isinstance(body, dict) else None
        if not isinstance(hits, list) or not hits:
            logger.info("Image search found nothing for query=%r", query)
            return ""

        first = hits[0] if isinstance(hits[0], dict) else {}
        return str(first.get("contentUrl") or "")

    def close(self) -> None:
        self._http.close()
