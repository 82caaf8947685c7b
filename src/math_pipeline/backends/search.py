from __future__ import annotations

from typing import Any

import httpx


class SearchUnavailableError(RuntimeError):
    """Raised when the MOI search backend cannot be reached."""


class HttpSearchProvider:
    """Forwards search configurations to a remote MOI search service."""

    def __init__(self, url: str | None, timeout_s: float = 30.0, client: httpx.Client | None = None) -> None:
        self._url = url
        self._timeout_s = timeout_s
        self._client = client

    def search(self, config: Any) -> Any:
        if not self._url:
            raise SearchUnavailableError("No search backend configured")
        client = self._client or httpx.Client(timeout=httpx.Timeout(self._timeout_s))
        try:
            response = client.post(self._url, json=config.to_payload())
            response.raise_for_status()
            return response.json()
        except (httpx.TransportError, httpx.HTTPStatusError) as exc:
            raise SearchUnavailableError(f"Unable to connect with database: {exc}") from exc
        except ValueError as exc:
            raise SearchUnavailableError(f"Search backend answered with malformed JSON: {exc}") from exc
        finally:
            if self._client is None:
                client.close()


__all__ = ["HttpSearchProvider", "SearchUnavailableError"]
