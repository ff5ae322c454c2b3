from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from servicedesk.routers.guards import optional_session
from servicedesk.schemas.bodies import RequestBody
from servicedesk.services.catalog_service import CatalogService
from servicedesk.services.session_service import SessionRecord

router = APIRouter(prefix="/api", tags=["catalog"])


def get_catalog_service() -> CatalogService:
    return CatalogService()


@router.get("/services")
def list_services(catalog: CatalogService = Depends(get_catalog_service)):
    return catalog.list_services()


@router.get("/alerts")
def list_alerts(catalog: CatalogService = Depends(get_catalog_service)):
    return catalog.list_alerts()


@router.post("/request")
def submit_request(
    body: Optional[RequestBody] = None,
    session: Optional[SessionRecord] = Depends(optional_session),
    catalog: CatalogService = Depends(get_catalog_service),
):
    # body is optional so an anonymous caller gets 401 before any field check
    body = body or RequestBody()
    catalog.submit_request(session, body.service, body.link, body.quantity, body.notes)
    return {"success": True, "message": "Request submitted successfully."}
