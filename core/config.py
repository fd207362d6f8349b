"""Environment-driven settings.

Values come from the process environment, after loading a ``.env`` file from the
working directory when one exists.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv
from loguru import logger

try:
    load_dotenv()
except Exception as e:  # pragma: no cover
    logger.warning(f"Failed to load .env file: {e}")

AUDIT_MODES = ("log", "none")


@dataclass(frozen=True)
class Settings:
    roles_file: str = "roles.json"
    roles_header: str = "Roles"
    audit: str = "log"

    def __post_init__(self):
        if self.audit not in AUDIT_MODES:
            raise ValueError(
                f"Unknown audit mode: {self.audit} (expected one of {', '.join(AUDIT_MODES)})"
            )


def get_settings() -> Settings:
    return Settings(
        roles_file=os.getenv("RBAC_ROLES_FILE", "roles.json"),
        roles_header=os.getenv("RBAC_ROLES_HEADER", "Roles"),
        audit=os.getenv("RBAC_AUDIT", "log").lower().strip(),
    )
