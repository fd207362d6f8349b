import sys

from loguru import logger

from core.errors import PermissionParseError, RoleSourceError
from core.loader import load_json_file
from core.rbac import PermissionResolver
from core.schemas import Permission

USAGE = "Usage: python main.py <roles.json> <permission> <role>[,<role>...]"


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) < 3:
        logger.error(USAGE)
        return 2

    roles_file, permission_text, roles_arg = argv[0], argv[1], argv[2]
    roles = [name.strip() for name in roles_arg.split(",") if name.strip()]

    try:
        required = Permission.parse(permission_text)
        registry = load_json_file(roles_file)
    except PermissionParseError as e:
        logger.error(f"Invalid permission {permission_text!r}: {e}")
        return 2
    except RoleSourceError as e:
        logger.error(f"Could not load {roles_file}: {e}")
        return 2

    resolver = PermissionResolver(registry)
    if resolver.check(roles, required):
        logger.success(f"ALLOW {required} for roles {roles}")
        return 0

    logger.warning(f"DENY {required} for roles {roles}")
    granted = sorted(str(p) for p in resolver.effective_permissions(roles))
    logger.info(f"Effective permissions: {', '.join(granted) or 'none'}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
