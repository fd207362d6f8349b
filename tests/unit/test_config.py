import pytest

from core.config import Settings, get_settings


def test_defaults(monkeypatch):
    for var in ("RBAC_ROLES_FILE", "RBAC_ROLES_HEADER", "RBAC_AUDIT"):
        monkeypatch.delenv(var, raising=False)

    settings = get_settings()
    assert settings == Settings()
    assert settings.roles_file == "roles.json"
    assert settings.roles_header == "Roles"
    assert settings.audit == "log"


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("RBAC_ROLES_FILE", "/etc/rbac/roles.json")
    monkeypatch.setenv("RBAC_ROLES_HEADER", "X-Roles")
    monkeypatch.setenv("RBAC_AUDIT", " NONE ")

    settings = get_settings()
    assert settings.roles_file == "/etc/rbac/roles.json"
    assert settings.roles_header == "X-Roles"
    assert settings.audit == "none"


def test_unknown_audit_mode(monkeypatch):
    monkeypatch.setenv("RBAC_AUDIT", "syslog")
    with pytest.raises(ValueError, match="Unknown audit mode"):
        get_settings()
