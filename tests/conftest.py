# tests/conftest.py
import json
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.audit import MemoryAuditSink  # noqa: E402
from core.gate import AuthorizationGate, GateConfig  # noqa: E402
from core.loader import load_roles  # noqa: E402

# ---------------------------------------------------------------------------
# Role fixtures shared by unit and integration tests
# ---------------------------------------------------------------------------
VALID_ROLES = {
    "user": {"permissions": ["view:home"], "inherits": []},
    "admin": {"permissions": ["view:admin.dashboard"], "inherits": []},
    "hr_manager": {
        "permissions": ["read:admin.settings", "view:hr.dashboard"],
        "inherits": ["user"],
    },
    "it_manager": {
        "permissions": ["read:admin.settings", "view:it.dashboard", "view:admin.dashboard"],
        "inherits": ["user"],
    },
    "sysadmin": {
        "permissions": ["view:sysadmin.dashboard"],
        "inherits": ["it_manager"],
    },
}

INVALID_ROLES = {
    "hr_manager": {"permissions": ["read:admin.settings"], "inherits": []},
    "it_manager": {"permissions": ["view:it.dashboard", "invalidblah"], "inherits": []},
}


def _request(roles="", path="/"):
    return SimpleNamespace(headers={"Roles": roles}, url=SimpleNamespace(path=path))


@pytest.fixture
def make_request():
    """Factory for a minimal request stand-in: a Roles header and a url path."""
    return _request


@pytest.fixture
def roles_file(tmp_path):
    path = tmp_path / "valid_rbac.json"
    path.write_text(json.dumps(VALID_ROLES))
    return path


@pytest.fixture
def invalid_roles_file(tmp_path):
    path = tmp_path / "invalid_rbac.json"
    path.write_text(json.dumps(INVALID_ROLES))
    return path


@pytest.fixture
def registry():
    return load_roles(VALID_ROLES)


@pytest.fixture
def audit_sink():
    return MemoryAuditSink()


@pytest.fixture
def gate(registry, audit_sink):
    return AuthorizationGate(registry, GateConfig(audit_sink=audit_sink))
