"""Load role definitions from JSON.

The source is an object keyed by role name::

    {
      "it_manager": {"permissions": ["view:it.dashboard"], "inherits": []},
      "sysadmin":   {"permissions": ["view:sysadmin.dashboard"], "inherits": ["it_manager"]}
    }

A load either registers every role in the source or none of them.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from .errors import PermissionParseError, RolePermissionInvalid, RoleSourceMalformed, RoleSourceUnreadable
from .metrics import REGISTERED_ROLES_GAUGE
from .rbac import RoleRegistry
from .schemas import Permission, RoleDefinition

_SOURCE_ADAPTER = TypeAdapter(Dict[str, RoleDefinition])


def _parse_role(name: str, definition: RoleDefinition) -> FrozenSet[Permission]:
    parsed = []
    for text in definition.permissions:
        try:
            parsed.append(Permission.parse(text))
        except PermissionParseError as e:
            raise RolePermissionInvalid(name, e) from e
    return frozenset(parsed)


def load_roles(
    data: Any,
    registry: Optional[RoleRegistry] = None,
    source: Optional[str] = None,
) -> RoleRegistry:
    """Validate ``data`` and register its roles into ``registry`` (or a new one).

    Raises RoleSourceMalformed when ``data`` is not a mapping of role
    definitions and RolePermissionInvalid, naming the role, when a permission
    string does not parse. Nothing is registered if either is raised.
    """
    try:
        definitions = _SOURCE_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise RoleSourceMalformed(e, source) from e

    staged: List[Tuple[str, FrozenSet[Permission], List[str]]] = []
    for name, definition in definitions.items():
        if not name:
            raise RoleSourceMalformed(ValueError("role name must not be empty"), source)
        staged.append((name, _parse_role(name, definition), definition.inherits))

    if registry is None:
        registry = RoleRegistry()
    for name, permissions, inherits in staged:
        registry.register(name, permissions, inherits)

    REGISTERED_ROLES_GAUGE.set(len(registry))
    logger.info(f"Loaded {len(staged)} roles from {source or 'mapping'}")
    return registry


def load_json_file(
    path: Union[str, Path], registry: Optional[RoleRegistry] = None
) -> RoleRegistry:
    """Read ``path`` and load it with :func:`load_roles`.

    Raises RoleSourceUnreadable when the file cannot be read and
    RoleSourceMalformed when it is not valid JSON; both carry the underlying
    error's message unchanged and chain it as ``__cause__``.
    """
    path = str(path)
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise RoleSourceUnreadable(e, path) from e
    except UnicodeDecodeError as e:
        raise RoleSourceMalformed(e, path) from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise RoleSourceMalformed(e, path) from e

    return load_roles(data, registry=registry, source=path)
