# public/services/assets.py

"""
ASSET STORE (slips, product images)

Payloads are an explicit tagged union, never sniffed:
- {"kind": "inline", "contentType": "image/jpeg", "data": "<base64>"}
- {"kind": "reference", "url": "https://..."}
- "data:image/png;base64,...."   (RFC 2397 data URI)
- any other non-empty string      (already a reference)

Inline bytes are decoded and written through Django storage under the
configured folder; only the resulting URL is ever persisted in a row.
"""

from __future__ import annotations

import base64
import binascii
import logging
import mimetypes
import re
import threading
import uuid
from contextlib import contextmanager

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

from public.services.exceptions import AssetError

logger = logging.getLogger(__name__)

DATA_URI_RE = re.compile(
    r"^data:(?P<content_type>[\w.+-]+/[\w.+-]+)?(?P<params>(?:;[^;,]*)*);base64,(?P<data>.*)$",
    re.DOTALL,
)

INLINE = "inline"
REFERENCE = "reference"


def parse_asset_payload(payload) -> tuple[str, dict]:
    """
    Returns (kind, fields):
    - ("reference", {"url": ...})
    - ("inline", {"content_type": ..., "data": ...})
    - ("", {}) for an empty payload
    """
    if payload is None or payload == "":
        return "", {}

    if isinstance(payload, str):
        s = payload.strip()
        if s.startswith("data:"):
            m = DATA_URI_RE.match(s)
            if not m:
                raise AssetError("Only base64 data URIs are accepted")
            return INLINE, {
                "content_type": (m.group("content_type") or "").lower(),
                "data": m.group("data"),
            }
        return REFERENCE, {"url": s}

    if isinstance(payload, dict):
        kind = str(payload.get("kind") or "").strip().lower()
        if kind == REFERENCE:
            url = str(payload.get("url") or "").strip()
            if not url:
                raise AssetError("Reference asset needs a url")
            return REFERENCE, {"url": url}
        if kind == INLINE:
            return INLINE, {
                "content_type": str(payload.get("contentType") or "").strip().lower(),
                "data": str(payload.get("data") or ""),
            }
        raise AssetError(f"Unknown asset kind '{kind}'")

    raise AssetError("Asset must be a string or an object")


class AssetStore:
    def __init__(self, *, folder: str, public_base_url: str = "", storage=None):
        self.folder = (folder or "").strip().strip("/")
        self.public_base_url = (public_base_url or "").strip()
        self.storage = storage or default_storage
        self._local = threading.local()

    @classmethod
    def from_settings(cls) -> "AssetStore":
        cfg = getattr(settings, "ASSETS", {}) or {}
        return cls(
            folder=cfg.get("FOLDER", ""),
            public_base_url=cfg.get("PUBLIC_BASE_URL", ""),
        )

    def store(self, payload, *, name_prefix: str) -> str:
        """Resolve a payload to a retrievable URL ("" when nothing was sent)."""
        kind, fields = parse_asset_payload(payload)
        if not kind:
            return ""
        if kind == REFERENCE:
            return fields["url"]
        return self._upload(fields["content_type"], fields["data"], name_prefix)

    def _upload(self, content_type: str, data: str, name_prefix: str) -> str:
        if not self.folder:
            raise AssetError("Asset storage folder is not configured")

        if not content_type.startswith("image/"):
            raise AssetError(f"Unsupported asset type '{content_type or 'unknown'}'")

        try:
            raw = base64.b64decode("".join(data.split()), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise AssetError("Asset data is not valid base64") from exc
        if not raw:
            raise AssetError("Asset data is empty")

        ext = mimetypes.guess_extension(content_type) or ".bin"
        safe_prefix = re.sub(r"[^\w.-]+", "_", name_prefix).strip("_") or "asset"
        name = f"{self.folder}/{safe_prefix}_{uuid.uuid4().hex[:8]}{ext}"

        saved = self.storage.save(name, ContentFile(raw))
        staged = getattr(self._local, "staged", None)
        if staged is not None:
            staged.append(saved)
        url = self._public_url(saved)

        logger.info(
            "Asset uploaded",
            extra={"asset_name": saved, "content_type": content_type, "size": len(raw)},
        )
        return url

    @contextmanager
    def discard_on_error(self):
        """Delete files uploaded inside the block if the block raises."""
        outer = getattr(self._local, "staged", None)
        staged = []
        self._local.staged = staged
        try:
            yield
        except BaseException:
            if staged:
                logger.info("Discarding uploads of a failed write", extra={"asset_names": list(staged)})
            for name in staged:
                self.storage.delete(name)
            staged.clear()
            raise
        finally:
            self._local.staged = outer
            if outer is not None:
                outer.extend(staged)

    def _public_url(self, saved_name: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{saved_name}"
        return self.storage.url(saved_name)

    def store_many(self, payloads, *, name_prefix: str) -> list[str]:
        urls = []
        for idx, p in enumerate(payloads or []):
            url = self.store(p, name_prefix=f"{name_prefix}_{idx}")
            if url:
                urls.append(url)
        return urls
