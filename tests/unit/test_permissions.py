"""Tests for Permission parsing and Role grants."""
import pytest
from pydantic import ValidationError

from core.errors import MalformedPermission, MissingAction, MissingResource, PermissionParseError
from core.schemas import Permission, Role


class TestPermissionParse:
    """Test Permission.parse and its canonical form."""

    def test_to_string(self):
        permission = Permission(action="action", resource="resource")
        assert str(permission) == "action:resource"

    def test_parse_valid(self):
        permission = Permission.parse("action:resource")
        assert permission.action == "action"
        assert permission.resource == "resource"

    def test_parse_splits_on_first_separator(self):
        permission = Permission.parse("read:db:users")
        assert permission.action == "read"
        assert permission.resource == "db:users"
        assert str(permission) == "read:db:users"

    @pytest.mark.parametrize(
        "action,resource",
        [("view", "admin.dashboard"), ("read", "a:b"), ("x", "y"), ("delete", "invoice/42")],
    )
    def test_round_trip(self, action, resource):
        permission = Permission(action=action, resource=resource)
        assert Permission.parse(str(permission)) == permission

    def test_malformed(self):
        with pytest.raises(MalformedPermission, match="invalid format"):
            Permission.parse("invalidblah")

    def test_missing_action(self):
        with pytest.raises(MissingAction, match="no action specified"):
            Permission.parse(":resource")

    def test_missing_resource(self):
        with pytest.raises(MissingResource, match="no resource specified"):
            Permission.parse("action:")

    def test_parse_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            Permission.parse("")
        assert issubclass(MissingAction, PermissionParseError)

    def test_empty_fields_rejected_on_construction(self):
        with pytest.raises(ValidationError):
            Permission(action="", resource="x")

    def test_separator_in_action_rejected_on_construction(self):
        with pytest.raises(ValidationError):
            Permission(action="a:b", resource="c")

        permission = Permission.parse("a:b:c")
        assert permission == Permission(action="a", resource="b:c")
        assert len({permission, Permission.parse(str(permission))}) == 1

    def test_value_equality_and_hashing(self):
        a = Permission.parse("view:home")
        b = Permission(action="view", resource="home")
        assert a == b
        assert len({a, b}) == 1

    def test_immutable(self):
        permission = Permission.parse("view:home")
        with pytest.raises(ValidationError):
            permission.action = "edit"


class TestRole:
    def test_grants_direct_permission_only(self):
        role = Role(
            name="hr_manager",
            permissions=frozenset({Permission.parse("read:admin.settings")}),
            inherits=("user",),
        )
        assert role.grants("read:admin.settings")
        assert role.grants(Permission.parse("read:admin.settings"))
        assert not role.grants("view:home")

    def test_defaults(self):
        role = Role(name="empty")
        assert role.permissions == frozenset()
        assert role.inherits == ()
