from __future__ import annotations

import subprocess
from typing import Sequence

import httpx

from ..models import TranslationResult


class TranslationError(RuntimeError):
    """Raised by a translator that could not translate an expression."""


class CommandTranslator:
    """Runs an external translator executable for one computer algebra system.

    ``{cas}`` and ``{latex}`` placeholders in the command are substituted per
    call; without a ``{latex}`` placeholder the expression goes to stdin.
    """

    def __init__(self, command: Sequence[str], cas: str, timeout_s: float = 30.0) -> None:
        if not command:
            raise ValueError("Translator command must not be empty")
        self._command = tuple(command)
        self._cas = cas
        self._timeout_s = timeout_s

    def build_command(self, latex: str) -> tuple[list[str], str | None]:
        args = [part.replace("{cas}", self._cas) for part in self._command]
        if any("{latex}" in part for part in args):
            return [part.replace("{latex}", latex) for part in args], None
        return args, latex

    def translate(self, latex: str) -> TranslationResult:
        args, stdin = self.build_command(latex)
        completed = subprocess.run(
            args,
            input=stdin,
            capture_output=True,
            text=True,
            timeout=self._timeout_s,
            check=False,
        )
        if completed.returncode != 0:
            detail = completed.stderr.strip() or f"exit status {completed.returncode}"
            raise TranslationError(f"{self._cas} translation failed: {detail}")
        return TranslationResult(output=completed.stdout.strip(), log=completed.stderr.strip())


class HttpTranslator:
    """Delegates to a translation web service answering ``{output, log}``."""

    def __init__(
        self,
        url: str,
        cas: str,
        timeout_s: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._url = url
        self._cas = cas
        self._timeout_s = timeout_s
        self._client = client

    def translate(self, latex: str) -> TranslationResult:
        client = self._client or httpx.Client(timeout=httpx.Timeout(self._timeout_s))
        try:
            response = client.post(self._url, data={"cas": self._cas, "latex": latex})
            response.raise_for_status()
        finally:
            if self._client is None:
                client.close()
        payload = response.json()
        if not isinstance(payload, dict):
            raise TranslationError(f"Unexpected translation response from {self._url}")
        output = payload.get("output")
        return TranslationResult(
            output=None if output is None else str(output),
            log=str(payload.get("log") or ""),
        )


__all__ = ["CommandTranslator", "HttpTranslator", "TranslationError"]
