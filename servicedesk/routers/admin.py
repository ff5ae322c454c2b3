"""Admin panel API: every route requires a session with the admin role."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from servicedesk.routers.catalog import get_catalog_service
from servicedesk.routers.guards import require_admin
from servicedesk.schemas.bodies import AlertBody, ServiceBody, ServiceNameBody
from servicedesk.services.catalog_service import CatalogService

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/requests")
def list_requests(catalog: CatalogService = Depends(get_catalog_service)):
    return catalog.list_requests()


@router.post("/services/add")
def add_service(body: ServiceBody, catalog: CatalogService = Depends(get_catalog_service)):
    catalog.add_service(body.name, body.icon, body.description)
    return {"success": True}


@router.post("/services/delete")
def delete_service(body: ServiceNameBody, catalog: CatalogService = Depends(get_catalog_service)):
    catalog.delete_service(body.name)
    return {"success": True}


@router.post("/alert")
def set_alert(body: AlertBody, catalog: CatalogService = Depends(get_catalog_service)):
    catalog.set_alert(body.message)
    return {"success": True}
