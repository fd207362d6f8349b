"""Authorization decision point placed in front of protected operations."""
from __future__ import annotations

import functools
import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence, Union

from loguru import logger

from .audit import AuditEvent, AuditSink, Decision, LoguruAuditSink, NullAuditSink, emit
from .config import Settings
from .errors import AccessDenied
from .loader import load_json_file
from .metrics import AUTHORIZATION_DECISIONS_COUNTER, REGISTERED_ROLES_GAUGE
from .rbac import PermissionResolver, RoleRegistry
from .schemas import Permission

__all__ = [
    "AuthorizationGate",
    "Decision",
    "GateConfig",
    "build_gate_from_settings",
    "header_role_extractor",
]

RoleExtractor = Callable[[Any], Sequence[str]]

DEFAULT_ROLES_HEADER = "Roles"


def header_role_extractor(header: str = DEFAULT_ROLES_HEADER) -> RoleExtractor:
    """Build an extractor reading a comma-separated role list from ``header``.

    Works with any request object exposing a ``headers`` mapping (Starlette,
    httpx, requests). Whitespace around names is stripped and empty names are
    dropped.
    """

    def extract(request: Any) -> List[str]:
        headers = getattr(request, "headers", None) or {}
        value = headers.get(header) or ""
        return [name.strip() for name in value.split(",") if name.strip()]

    return extract


@dataclass
class GateConfig:
    """Collaborators of an :class:`AuthorizationGate`.

    Attributes:
        role_extractor: maps a request to the caller's role names. When unset,
            the ``roles_header`` header is split on commas.
        audit_sink: receives one AuditEvent per decision.
        roles_header: header read by the default extractor.
    """

    role_extractor: Optional[RoleExtractor] = None
    audit_sink: AuditSink = field(default_factory=LoguruAuditSink)
    roles_header: str = DEFAULT_ROLES_HEADER

    def extractor(self) -> RoleExtractor:
        return self.role_extractor or header_role_extractor(self.roles_header)


def _describe_target(request: Any) -> str:
    url = getattr(request, "url", None)
    if url is None:
        return repr(request)
    return str(getattr(url, "path", url))


class AuthorizationGate:
    def __init__(self, registry: RoleRegistry, config: Optional[GateConfig] = None):
        self.config = config or GateConfig()
        self._extract = self.config.extractor()
        self.resolver = PermissionResolver(registry)

    @property
    def registry(self) -> RoleRegistry:
        return self.resolver.registry

    def reload(self, registry: RoleRegistry) -> None:
        """Start answering from ``registry``; in-flight checks finish on the old one."""
        self.resolver = PermissionResolver(registry)
        REGISTERED_ROLES_GAUGE.set(len(registry))
        logger.info(f"Authorization gate reloaded with {len(registry)} roles")

    def roles_for(self, request: Any) -> List[str]:
        """Role names from the configured extractor; never raises.

        A bare string counts as one role name. Non-string entries are dropped.
        """
        try:
            extracted = self._extract(request)
            if extracted is None:
                return []
            if isinstance(extracted, str):
                extracted = [extracted]
            roles = list(extracted)
        except Exception as e:
            logger.exception(f"Role extraction failed, treating caller as roleless: {e}")
            return []

        names = [name for name in roles if isinstance(name, str)]
        if len(names) != len(roles):
            logger.warning(f"Dropped {len(roles) - len(names)} non-string role names from extractor")
        return names

    def authorize(self, request: Any, required: Union[Permission, str]) -> Decision:
        """Decide whether ``request`` may proceed and record the decision.

        Never raises: unknown roles, unknown permissions and cyclic role graphs
        all end in a plain allow or deny.
        """
        roles = self.roles_for(request)
        resolver = self.resolver
        decision = Decision.ALLOW if resolver.check(roles, required) else Decision.DENY

        AUTHORIZATION_DECISIONS_COUNTER.labels(decision=decision.value).inc()
        emit(
            self.config.audit_sink,
            AuditEvent(
                target=_describe_target(request),
                permission=str(required),
                roles=tuple(roles),
                decision=decision,
            ),
        )
        return decision

    def is_allowed(self, request: Any, required: Union[Permission, str]) -> bool:
        return self.authorize(request, required) is Decision.ALLOW

    def require(self, permission: Union[Permission, str]) -> Callable:
        """Decorator guarding a callable whose first argument is the request.

        The permission is parsed here, so a malformed string fails when the
        route is wired rather than on the first request. On deny the wrapped
        callable is not run and AccessDenied is raised.
        """
        required = permission if isinstance(permission, Permission) else Permission.parse(permission)

        def wrapper(fn: Callable) -> Callable:
            if inspect.iscoroutinefunction(fn):

                @functools.wraps(fn)
                async def async_inner(request, *args, **kwargs):
                    if not self.is_allowed(request, required):
                        raise AccessDenied(str(required))
                    return await fn(request, *args, **kwargs)

                return async_inner

            @functools.wraps(fn)
            def inner(request, *args, **kwargs):
                if not self.is_allowed(request, required):
                    raise AccessDenied(str(required))
                return fn(request, *args, **kwargs)

            return inner

        return wrapper


def build_gate_from_settings(settings: Settings) -> AuthorizationGate:
    """Load ``settings.roles_file`` and build a gate configured from ``settings``.

    Load errors propagate; a gate is never built from a partial registry.
    """
    registry = load_json_file(settings.roles_file)
    sink: AuditSink = NullAuditSink() if settings.audit == "none" else LoguruAuditSink()
    return AuthorizationGate(
        registry, GateConfig(audit_sink=sink, roles_header=settings.roles_header)
    )
