"""Exception types raised while parsing permissions and loading role sources."""
from __future__ import annotations

from typing import Optional


class RBACError(Exception):
    """Base class for every error raised by the authorization layer."""


class PermissionParseError(RBACError, ValueError):
    pass


class MalformedPermission(PermissionParseError):
    def __init__(self, text: str):
        super().__init__("invalid format")
        self.text = text


class MissingAction(PermissionParseError):
    def __init__(self, text: str):
        super().__init__("no action specified")
        self.text = text


class MissingResource(PermissionParseError):
    def __init__(self, text: str):
        super().__init__("no resource specified")
        self.text = text


class RoleSourceError(RBACError):
    pass


class RoleSourceUnreadable(RoleSourceError):
    """The role source could not be read. The message is the OS error's own."""

    def __init__(self, error: OSError, path: Optional[str] = None):
        super().__init__(str(error))
        self.error = error
        self.path = path


class RoleSourceMalformed(RoleSourceError):
    """The role source is not JSON, or not a mapping of role definitions."""

    def __init__(self, error: Exception, path: Optional[str] = None):
        super().__init__(str(error))
        self.error = error
        self.path = path


class RolePermissionInvalid(RoleSourceError):
    def __init__(self, role: str, error: PermissionParseError):
        super().__init__(f"error loading permission for role {role}: {error}")
        self.role = role
        self.error = error


class AccessDenied(RBACError, PermissionError):
    def __init__(self, permission: str):
        super().__init__("Access denied")
        self.permission = permission
