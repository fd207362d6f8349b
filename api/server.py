# api/server.py
"""Example application with role-protected dashboards.

Run with ``uvicorn --factory api.server:create_app``; roles are read from the
file named by ``RBAC_ROLES_FILE``.
"""
from typing import Optional

from fastapi import Depends, FastAPI
from loguru import logger
from prometheus_client import make_asgi_app

from api.middleware.auth import require_permission
from core.config import get_settings
from core.gate import AuthorizationGate, build_gate_from_settings

PROTECTED_ROUTES = {
    "/admin/dashboard": ("view:admin.dashboard", "Admin Dashboard"),
    "/it/dashboard": ("view:it.dashboard", "IT Dashboard"),
    "/sysadmin/dashboard": ("view:sysadmin.dashboard", "Sysadmin Dashboard"),
}


def _add_dashboard(app: FastAPI, gate: AuthorizationGate, path: str, permission: str, title: str):
    @app.get(path, dependencies=[Depends(require_permission(gate, permission))])
    def dashboard():
        return {"message": title}

    return dashboard


def create_app(gate: Optional[AuthorizationGate] = None) -> FastAPI:
    if gate is None:
        gate = build_gate_from_settings(get_settings())

    app = FastAPI(title="RBAC Gate")
    app.state.gate = gate

    # Mount Prometheus Metrics Endpoint
    app.mount("/metrics", make_asgi_app())

    @app.get("/health")
    async def health():
        return {"status": "ok", "roles": len(gate.registry)}

    for path, (permission, title) in PROTECTED_ROUTES.items():
        _add_dashboard(app, gate, path, permission, title)

    logger.info(f"Serving {len(PROTECTED_ROUTES)} protected routes")
    return app
