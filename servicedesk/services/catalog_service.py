"""
Service catalog, customer requests and site alerts over the App document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from servicedesk.core import notifier
from servicedesk.core.config import get_settings
from servicedesk.core.errors import BadRequestError, UnauthorizedError
from servicedesk.repositories import json_storage
from servicedesk.services.session_service import SessionRecord

logger = logging.getLogger(__name__)


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """Locale-style stamp, e.g. ``10/19/2026, 3:04:05 PM``."""
    moment = moment or datetime.now()
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{moment.month}/{moment.day}/{moment.year}, {hour}:{moment:%M:%S} {suffix}"


def order_summary(username: str, service: Any, link: Any, quantity: Any, notes: Any) -> str:
    return (
        "New request:\n"
        f"- Customer: {username}\n"
        f"- Service: {service}\n"
        f"- Link: {link}\n"
        f"- Quantity: {quantity}\n"
        f"- Notes: {notes or 'none'}"
    )


@dataclass
class CatalogService:
    """Read-modify-write operations on the services/requests/alerts collections."""

    def __post_init__(self):
        self.settings = get_settings()

    @property
    def app_document(self) -> str:
        return self.settings.app_data_file

    def _list(self, key: str) -> list:
        return json_storage.load(self.app_document).get(key) or []

    # -------------------------------------- public --------------------------------------
    def list_services(self) -> list:
        return self._list("services")

    def list_alerts(self) -> list:
        return self._list("alerts")

    def submit_request(
        self,
        session: Optional[SessionRecord],
        service: Any,
        link: Any,
        quantity: Any,
        notes: Any = None,
    ) -> dict:
        if not session or not session.is_authenticated:
            raise UnauthorizedError("Authentication required.")
        if not service or not link or not quantity:
            raise BadRequestError("Request details are incomplete.")
        with json_storage.update(self.app_document) as document:
            requests = json_storage.collection(document, "requests")
            # len + 1 mirrors the ids already stored; not unique if requests are ever removed
            entry = {
                "id": len(requests) + 1,
                "username": session.username,
                "service": service,
                "link": link,
                "quantity": quantity,
                "notes": notes,
                "date": format_timestamp(),
            }
            requests.append(entry)
        logger.info("Request %s submitted by %s for %s", entry["id"], session.username, service)
        self._notify(order_summary(session.username, service, link, quantity, notes))
        return entry

    def _notify(self, message: str) -> None:
        try:
            notifier.send_whatsapp_notification(message)
        except Exception:
            logger.exception("Notification failed; the request was stored anyway")

    # -------------------------------------- admin --------------------------------------
    def list_requests(self) -> list:
        return self._list("requests")

    def add_service(self, name: Any, icon: Any, description: Any) -> dict:
        service = {"name": name, "icon": icon, "description": description}
        with json_storage.update(self.app_document) as document:
            json_storage.collection(document, "services").append(service)
        logger.info("Service %r added", name)
        return service

    def delete_service(self, name: Any) -> int:
        """Remove every service called ``name``; returns how many were removed."""
        with json_storage.update(self.app_document) as document:
            services = json_storage.collection(document, "services")
            kept = [item for item in services if item.get("name") != name]
            removed = len(services) - len(kept)
            document["services"] = kept
        logger.info("Service %r deleted (%d entries)", name, removed)
        return removed

    def set_alert(self, message: Any) -> dict:
        alert = {"message": message, "date": format_timestamp()}
        with json_storage.update(self.app_document) as document:
            document["alerts"] = [alert]
        logger.info("Alert replaced")
        return alert
