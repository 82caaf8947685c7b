from __future__ import annotations

import json
import logging
import subprocess

import httpx

from ..config import ConversionConfig
from .base import BackendError, LaTeXMLOptions, LaTeXMLResponse

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    0: "No obvious problems",
    1: "Warnings",
    2: "Errors",
    3: "Fatal error",
}


def _status_text(code: int) -> str:
    return STATUS_MESSAGES.get(code, f"Exit status {code}")


class LocalLaTeXML:
    """Runs the ``latexmlc`` executable installed on this machine."""

    def build_command(self, latex: str, options: LaTeXMLOptions, config: ConversionConfig) -> list[str]:
        args = [config.command]
        for key, value in options.as_pairs():
            args.append(f"--{key}" if value is None else f"--{key}={value}")
        args.append(f"literal:{latex}")
        return args

    def convert(self, latex: str, options: LaTeXMLOptions, config: ConversionConfig) -> LaTeXMLResponse:
        args = self.build_command(latex, options, config)
        try:
            completed = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=config.timeout_s,
                check=False,
            )
        except FileNotFoundError as exc:
            raise BackendError("NOT_INSTALLED", f"LaTeXML executable not found: {config.command}") from exc
        except subprocess.TimeoutExpired as exc:
            raise BackendError("TIMEOUT", f"LaTeXML did not finish within {config.timeout_s}s") from exc
        code = completed.returncode
        return LaTeXMLResponse(
            result=completed.stdout or None,
            log=completed.stderr or "",
            status=_status_text(code),
            status_code=code,
        )


class RemoteLaTeXML:
    """Talks to a LaTeXML web service (ltxmojo style JSON responses)."""

    def __init__(self, client: httpx.Client | None = None) -> None:
        self._client = client

    def build_form(self, latex: str, options: LaTeXMLOptions) -> dict[str, str | list[str]]:
        form: dict[str, str | list[str]] = {}
        preloads: list[str] = []
        for key, value in options.as_pairs():
            if key == "preload":
                preloads.append(value or "")
            else:
                form[key] = value or ""
        if preloads:
            form["preload"] = preloads
        form["tex"] = f"literal:{latex}"
        return form

    def convert(self, latex: str, options: LaTeXMLOptions, config: ConversionConfig) -> LaTeXMLResponse:
        form = self.build_form(latex, options)
        client = self._client or httpx.Client(timeout=httpx.Timeout(config.timeout_s))
        try:
            response = client.post(config.url, data=form)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise BackendError("TIMEOUT", f"LaTeXML service timed out: {config.url}") from exc
        except httpx.HTTPStatusError as exc:
            raise BackendError(
                "HTTP_ERROR", f"LaTeXML service answered {exc.response.status_code}: {config.url}"
            ) from exc
        except httpx.TransportError as exc:
            raise BackendError("UNREACHABLE", f"LaTeXML service unreachable: {config.url}") from exc
        finally:
            if self._client is None:
                client.close()
        return parse_service_response(response.text)


def parse_service_response(body: str) -> LaTeXMLResponse:
    try:
        payload = json.loads(body)
    except json.JSONDecodeError as exc:
        raise BackendError("MALFORMED_RESPONSE", "LaTeXML service response is not JSON") from exc
    if not isinstance(payload, dict) or "result" not in payload:
        raise BackendError("MALFORMED_RESPONSE", "LaTeXML service response has no result")
    try:
        status_code = int(payload.get("status_code", 0) or 0)
    except (TypeError, ValueError) as exc:
        raise BackendError("MALFORMED_RESPONSE", "LaTeXML status_code is not a number") from exc
    result = payload.get("result")
    return LaTeXMLResponse(
        result=None if result is None else str(result),
        log=str(payload.get("log") or ""),
        status=str(payload.get("status") or _status_text(status_code)),
        status_code=status_code,
    )


__all__ = ["LocalLaTeXML", "RemoteLaTeXML", "parse_service_response"]
