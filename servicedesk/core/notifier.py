"""
WhatsApp notification adapter.

There is no delivery integration yet: the share URL is built from Settings
and written to the log so operators can follow new orders. The function
mirrors a real sender's contract (returns whether the message went out and
never raises for delivery problems).
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from .config import get_settings

logger = logging.getLogger(__name__)


def build_whatsapp_url(message: str) -> str:
    settings = get_settings()
    return f"{settings.whatsapp_api_url}{settings.whatsapp_number}&text={quote(message, safe='')}"


def send_whatsapp_notification(message: str) -> bool:
    """Log the notification URL; returns False when notifications are off."""
    settings = get_settings()
    if not settings.notifications_enabled:
        logger.info("[whatsapp] notifications disabled; skipping message")
        return False
    if not settings.whatsapp_number:
        logger.warning("[whatsapp] WHATSAPP_NUMBER not configured; URL has no recipient")
    logger.info("[whatsapp] Sending notification: %s", build_whatsapp_url(message))
    return True
