# public/services/notifications.py

"""
CHAT NOTIFIER (best effort)

Posts a short text message to the configured chat webhook. Failures are
logged and swallowed: a notification never fails or rolls back the write
that triggered it. `fire()` sends from a daemon thread so the response
does not wait on the webhook.
"""

from __future__ import annotations

import json
import logging
import threading
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from django.conf import settings

logger = logging.getLogger("notifications")


class ChatNotifier:
    def __init__(self, *, webhook_url: str = "", timeout: float = 10.0):
        self.webhook_url = (webhook_url or "").strip()
        self.timeout = float(timeout)

    @classmethod
    def from_settings(cls) -> "ChatNotifier":
        cfg = getattr(settings, "NOTIFICATIONS", {}) or {}
        return cls(
            webhook_url=cfg.get("CHAT_WEBHOOK_URL", ""),
            timeout=cfg.get("TIMEOUT_SECONDS", 10),
        )

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    def send(self, message: str) -> bool:
        if not self.enabled:
            return False

        req = Request(
            self.webhook_url,
            data=json.dumps({"text": message}, ensure_ascii=False).encode("utf-8"),
            headers={"Content-Type": "application/json; charset=UTF-8"},
            method="POST",
        )
        try:
            with urlopen(req, timeout=self.timeout) as resp:
                resp.read()
        except HTTPError as e:
            logger.warning("Chat webhook rejected notification", extra={"status": e.code})
            return False
        except (URLError, OSError, ValueError) as e:
            logger.warning("Chat webhook unreachable", extra={"error": str(e)})
            return False
        return True

    def fire(self, message: str) -> threading.Thread | None:
        if not self.enabled:
            return None
        t = threading.Thread(target=self.send, args=(message,), daemon=True)
        t.start()
        return t


def new_order_message(order) -> str:
    return (
        f"🛍️ *New Order* ({order.id})\n"
        f"Customer: {order.customer_name}\n"
        f"Total: {order.total_amount}"
    )


def payment_updated_message(order) -> str:
    return f"💳 *Payment Updated* for Order ({order.id})\nA new slip has been uploaded."
