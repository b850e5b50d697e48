# storefront/transport.py

"""
GATEWAY HTTP CLIENT

- GET for read actions (?action=...&t=<ms> cache-buster)
- POST for write actions, JSON body sent as text/plain (no CORS preflight)

Failure taxonomy:
- TransportError: unreachable / timeout / non-2xx without an envelope
- ProtocolError: a body that is not JSON (HTML error page, garbage)
- BackendError:  a well-formed {"status": "error"} envelope
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit
from urllib.request import Request, urlopen

from storefront.exceptions import BackendError, ProtocolError, TransportError

logger = logging.getLogger(__name__)


def _safe_preview(text: str, limit: int = 300) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + " …(truncated)"


def _with_query(url: str, **params) -> str:
    parts = urlsplit(url)
    query = dict(parse_qsl(parts.query))
    query.update({k: v for k, v in params.items() if v is not None})
    return urlunsplit(parts._replace(query=urlencode(query)))


def _looks_like_html(text: str) -> bool:
    return text.lstrip().startswith("<")


def _error_from_envelope(parsed: Any, *, status=None) -> BackendError | None:
    if isinstance(parsed, dict) and parsed.get("status") == "error":
        return BackendError(
            str(parsed.get("message") or "Backend error"),
            code=str(parsed.get("code") or ""),
            retryable=bool(parsed.get("retryable")),
            status=status,
        )
    return None


class GatewayClient:
    def __init__(self, base_url: str, *, timeout: float = 30.0):
        self.base_url = (base_url or "").strip()
        self.timeout = float(timeout)

    def _require_url(self) -> str:
        if not self.base_url:
            raise TransportError("Backend gateway URL is not configured")
        return self.base_url

    def get(self, action: str, **params) -> Any:
        url = _with_query(
            self._require_url(), action=action, t=str(int(time.time() * 1000)), **params
        )
        return self._send(Request(url, method="GET"), action)

    def post(self, payload: dict) -> Any:
        url = _with_query(self._require_url(), t=str(int(time.time() * 1000)))
        req = Request(
            url,
            data=json.dumps(payload, ensure_ascii=False, default=str).encode("utf-8"),
            headers={"Content-Type": "text/plain;charset=utf-8"},
            method="POST",
        )
        return self._send(req, str(payload.get("action")))

    def _send(self, req: Request, action: str) -> Any:
        try:
            with urlopen(req, timeout=self.timeout) as resp:
                raw = resp.read().decode("utf-8", errors="replace")
        except HTTPError as e:
            try:
                raw = e.read().decode("utf-8", errors="replace")
            except OSError:
                raw = ""
            try:
                err = _error_from_envelope(json.loads(raw), status=e.code)
            except ValueError:
                err = None
            if err is not None:
                raise err from e
            raise TransportError(f"HTTP {e.code}: {_safe_preview(raw)}") from e
        except (URLError, OSError) as e:
            raise TransportError(f"Backend unreachable: {e}") from e

        if _looks_like_html(raw):
            logger.error(
                "Gateway returned HTML instead of JSON",
                extra={"action": action, "body_preview": _safe_preview(raw)},
            )
            raise ProtocolError("Invalid response from server (HTML)")

        try:
            parsed = json.loads(raw)
        except ValueError as e:
            logger.error(
                "Gateway returned unparseable JSON",
                extra={"action": action, "body_preview": _safe_preview(raw)},
            )
            raise ProtocolError("Invalid response from server") from e

        err = _error_from_envelope(parsed)
        if err is not None:
            raise err
        return parsed
