from __future__ import annotations

import httpx


class MathoidError(RuntimeError):
    """Raised when Mathoid answers but does not deliver MathML."""


class MathoidClient:
    def __init__(self, timeout_s: float = 10.0, client: httpx.Client | None = None) -> None:
        self._timeout_s = timeout_s
        self._client = client

    def convert_latex(self, latex: str, url: str) -> str:
        """Return Mathoid's enriched MathML for *latex*.

        Transport failures surface as :class:`httpx.TransportError`.
        """

        client = self._client or httpx.Client(timeout=httpx.Timeout(self._timeout_s))
        try:
            response = client.post(f"{url.rstrip('/')}/mml", data={"q": latex, "type": "tex"})
        finally:
            if self._client is None:
                client.close()
        if response.status_code >= 400:
            raise MathoidError(f"Mathoid answered {response.status_code}: {response.text.strip()}")
        if not response.text.strip():
            raise MathoidError("Mathoid returned an empty response")
        return response.text


__all__ = ["MathoidClient", "MathoidError"]
