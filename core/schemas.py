from typing import FrozenSet, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import MalformedPermission, MissingAction, MissingResource

SEPARATOR = ":"


class Permission(BaseModel):
    """An ``action:resource`` pair, e.g. ``view:admin.dashboard``."""

    model_config = ConfigDict(frozen=True)

    action: str = Field(..., min_length=1)
    resource: str = Field(..., min_length=1)

    @field_validator("action")
    @classmethod
    def _action_has_no_separator(cls, value: str) -> str:
        # keeps field equality identical to canonical-form equality
        if SEPARATOR in value:
            raise ValueError(f"action must not contain {SEPARATOR!r}")
        return value

    @classmethod
    def parse(cls, text: str) -> "Permission":
        """Split ``text`` on its first ``:``.

        Raises MalformedPermission when there is no separator, MissingAction or
        MissingResource when either half is empty.
        """
        action, sep, resource = text.partition(SEPARATOR)
        if not sep:
            raise MalformedPermission(text)
        if not action:
            raise MissingAction(text)
        if not resource:
            raise MissingResource(text)
        return cls(action=action, resource=resource)

    def __str__(self) -> str:
        return f"{self.action}{SEPARATOR}{self.resource}"


class Role(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    permissions: FrozenSet[Permission] = frozenset()
    # may name unknown roles, the role itself, or close a cycle
    inherits: Tuple[str, ...] = ()

    def grants(self, permission) -> bool:
        """Direct grant only; inherited roles are resolved by PermissionResolver."""
        wanted = str(permission)
        return any(str(p) == wanted for p in self.permissions)


class RoleDefinition(BaseModel):
    """One entry of a JSON role source: ``{"permissions": [...], "inherits": [...]}``."""

    permissions: List[str] = Field(default_factory=list)
    inherits: List[str] = Field(default_factory=list)

    @field_validator("permissions", "inherits", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return [] if value is None else value
