#!/usr/bin/env python3
# scripts/check_roles.py
"""Pre-commit hook validating JSON role files.

A file fails when it cannot be loaded (unreadable, not JSON, or a permission
string that does not parse). Inheritance from undefined roles and inheritance
cycles are legal, so they are only reported.
"""
import sys
from pathlib import Path
from typing import List, Tuple

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.errors import RoleSourceError  # noqa: E402
from core.loader import load_json_file  # noqa: E402
from core.rbac import RoleRegistry  # noqa: E402


def dangling_references(registry: RoleRegistry) -> List[Tuple[str, str]]:
    """(role, missing parent) for every inherits entry naming an undefined role."""
    missing = []
    for name in registry.names():
        for parent in registry.lookup(name).inherits:
            if parent not in registry:
                missing.append((name, parent))
    return missing


def find_cycles(registry: RoleRegistry) -> List[List[str]]:
    """Inheritance cycles, each as the path of role names that closes it."""
    cycles: List[List[str]] = []
    done = set()

    for start in registry.names():
        if start in done:
            continue
        path: List[str] = []
        on_path = set()
        stack = [(start, iter(registry.lookup(start).inherits))]
        path.append(start)
        on_path.add(start)
        while stack:
            name, parents = stack[-1]
            parent = next(parents, None)
            if parent is None:
                stack.pop()
                path.pop()
                on_path.discard(name)
                done.add(name)
                continue
            if parent in on_path:
                cycles.append(path[path.index(parent):] + [parent])
            elif parent in registry and parent not in done:
                stack.append((parent, iter(registry.lookup(parent).inherits)))
                path.append(parent)
                on_path.add(parent)

    return cycles


def check_file(filepath: Path) -> Tuple[bool, List[str]]:
    """Load a role file; return (loaded, messages)."""
    try:
        registry = load_json_file(filepath)
    except RoleSourceError as e:
        return False, [f"Error loading roles: {e}"]

    notes = []
    for role, parent in dangling_references(registry):
        notes.append(f"Role '{role}' inherits undefined role '{parent}'")
    for cycle in find_cycles(registry):
        notes.append(f"Inheritance cycle: {' -> '.join(cycle)}")
    return True, notes


def main(argv=None):
    """Main pre-commit check."""
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print("Usage: check_roles.py <file>...")
        return 0

    all_passed = True

    for filepath in argv:
        path = Path(filepath)
        if path.suffix != ".json":
            continue

        passed, notes = check_file(path)
        if not passed:
            all_passed = False
            print(f"\n❌ ROLES: {filepath} cannot be loaded")
        elif notes:
            print(f"\n⚠️  ROLES: {filepath}")
        for note in notes:
            print(f"   {note}")

    if not all_passed:
        print("\n" + "=" * 80)
        print("Fix the role files above; a failed load leaves the gate with no roles.")
        print("=" * 80)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
