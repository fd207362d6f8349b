"""Authorization dependency helpers for FastAPI routes.

``require_permission`` turns an AuthorizationGate decision into either the
route running or a bare 403. The response never says which roles or
permissions were evaluated; that detail only goes to the audit sink.
"""
from __future__ import annotations

from typing import Callable, Union

from fastapi import HTTPException, Request

from core.gate import AuthorizationGate, Decision
from core.schemas import Permission

FORBIDDEN_DETAIL = "Forbidden"


def require_permission(
    gate: AuthorizationGate, permission: Union[Permission, str]
) -> Callable:
    required = permission if isinstance(permission, Permission) else Permission.parse(permission)

    async def _require_permission(request: Request) -> Decision:
        decision = gate.authorize(request, required)
        if decision is not Decision.ALLOW:
            raise HTTPException(status_code=403, detail=FORBIDDEN_DETAIL)
        return decision

    return _require_permission
