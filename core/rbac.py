"""Role registry and inheritance-aware permission resolution."""
from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Set, Union

from .schemas import Permission, Role

PermissionLike = Union[Permission, str]


class RoleRegistry:
    """Mapping of role name -> Role.

    Populated by a loader, then only read. Reads need no locking; to change the
    role graph of a running gate build a new registry and swap it in with
    ``AuthorizationGate.reload``.
    """

    def __init__(self, roles: Optional[Iterable[Role]] = None):
        self._roles: Dict[str, Role] = {}
        for role in roles or ():
            self._roles[role.name] = role

    def register(
        self,
        name: str,
        permissions: Iterable[PermissionLike] = (),
        inherits: Iterable[str] = (),
    ) -> Role:
        """Insert or replace ``name``. Strings in ``permissions`` are parsed."""
        parsed = frozenset(
            p if isinstance(p, Permission) else Permission.parse(p)
            for p in permissions
        )
        role = Role(name=name, permissions=parsed, inherits=tuple(inherits))
        self._roles[name] = role
        return role

    def lookup(self, name: str) -> Optional[Role]:
        return self._roles.get(name)

    def names(self) -> List[str]:
        return sorted(self._roles)

    def __contains__(self, name: object) -> bool:
        return name in self._roles

    def __iter__(self) -> Iterator[str]:
        return iter(self._roles)

    def __len__(self) -> int:
        return len(self._roles)

    def __repr__(self):
        return f"<RoleRegistry {len(self._roles)} roles>"


class PermissionResolver:
    """Answers whether a set of role names grants a permission.

    Every call walks the inheritance graph depth-first from the assigned roles
    with its own visited set, so self-inheritance, cycles and diamonds are each
    visited once. Names missing from the registry contribute nothing.
    """

    def __init__(self, registry: RoleRegistry):
        self.registry = registry

    def walk(self, assigned_roles: Iterable[str]) -> Iterator[Role]:
        """Yield every known role reachable from ``assigned_roles``, once each.

        Order is depth-first: a role's ancestors come before the next assigned
        role, matching the order in which grants are checked.
        """
        visited: Set[str] = set()
        stack = list(assigned_roles)
        stack.reverse()
        while stack:
            name = stack.pop()
            if name in visited:
                continue
            visited.add(name)
            role = self.registry.lookup(name)
            if role is None:
                continue
            yield role
            stack.extend(reversed(role.inherits))

    def check(self, assigned_roles: Iterable[str], required: PermissionLike) -> bool:
        """True if any assigned role, directly or through inheritance, grants ``required``.

        ``required`` is compared by canonical form and never parsed, so this
        never raises for unknown roles or permissions.
        """
        wanted = str(required)
        return any(role.grants(wanted) for role in self.walk(assigned_roles))

    def effective_permissions(self, assigned_roles: Iterable[str]) -> FrozenSet[Permission]:
        granted: Set[Permission] = set()
        for role in self.walk(assigned_roles):
            granted.update(role.permissions)
        return frozenset(granted)
