"""
FastAPI routers grouped by domain (auth, catalog, admin, pages).

Each module exposes an APIRouter included by servicedesk.app.create_app.
Handlers stay thin: they resolve the session, call a service and shape the
JSON answer.
"""
