#!/usr/bin/env python3
"""Seed the permission catalog and the built-in system roles.

Usage:
    python scripts/seed_catalog.py [--dry-run]

Idempotent: existing modules, types, permissions and roles are left as they
are; missing ones are inserted. System role grants are re-activated if they
were deactivated. Reads DATABASE_URL like the API does.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from psycopg import AsyncConnection

from hraccess.config import get_settings
from hraccess.logging_config import setup_logging

logger = logging.getLogger("seed_catalog")

PERMISSION_TYPES = [
    ("C", "Create"),
    ("R", "Read"),
    ("U", "Update"),
    ("D", "Delete"),
    ("A", "Approve"),
    ("M", "Manage"),
]

# (code, name, permission type codes)
MODULES = [
    ("USER_MANAGEMENT", "User Management", "CRUD"),
    ("EMPLOYEES", "Employees", "CRUD"),
    ("DEPARTMENTS", "Departments", "CRUD"),
    ("POSITIONS", "Positions", "CRUD"),
    ("COMPETENCIES", "Competencies", "CRUDM"),
    ("ASSESSMENTS", "Assessments", "CRUDA"),
    ("DEVELOPMENT_PLANS", "Development Plans", "CRUDA"),
    ("REPORTS", "Reports", "R"),
]

# (code, name, description, {module: type codes}); "*" means every module and type
SYSTEM_ROLES = [
    ("HR_ADMIN", "HR Administrator", "Full access to HR data and user management", "*"),
    (
        "MANAGER",
        "Manager",
        "Reads organisation data, approves assessments and plans",
        {
            "EMPLOYEES": "R",
            "DEPARTMENTS": "R",
            "POSITIONS": "R",
            "COMPETENCIES": "R",
            "ASSESSMENTS": "CRUA",
            "DEVELOPMENT_PLANS": "CRUA",
            "REPORTS": "R",
        },
    ),
    (
        "EMPLOYEE",
        "Employee",
        "Self-service access",
        {
            "COMPETENCIES": "R",
            "ASSESSMENTS": "RU",
            "DEVELOPMENT_PLANS": "RU",
        },
    ),
]


async def seed(conn: AsyncConnection) -> dict[str, int]:
    """Insert missing catalog rows and system roles. Returns inserted row counts."""
    counts = {"types": 0, "modules": 0, "permissions": 0, "roles": 0, "grants": 0}

    for code, name in PERMISSION_TYPES:
        cur = await conn.execute(
            "INSERT INTO permission_type (code, name) VALUES (%s, %s) "
            "ON CONFLICT (code) DO NOTHING",
            (code, name),
        )
        counts["types"] += cur.rowcount

    for order, (code, name, type_codes) in enumerate(MODULES):
        cur = await conn.execute(
            "INSERT INTO application_module (code, name, display_order) VALUES (%s, %s, %s) "
            "ON CONFLICT (code) DO NOTHING",
            (code, name, order),
        )
        counts["modules"] += cur.rowcount
        cur = await conn.execute(
            "INSERT INTO permission (module_id, permission_type_id) "
            "SELECT m.id, t.id FROM application_module m, permission_type t "
            "WHERE m.code = %s AND t.code = ANY(%s) "
            "ON CONFLICT (module_id, permission_type_id) DO NOTHING",
            (code, list(type_codes)),
        )
        counts["permissions"] += cur.rowcount

    for code, name, description, grants in SYSTEM_ROLES:
        cur = await conn.execute(
            "INSERT INTO role (name, code, description, is_system_role) "
            "VALUES (%s, %s, %s, true) ON CONFLICT (code) DO NOTHING",
            (name, code, description),
        )
        counts["roles"] += cur.rowcount

        if grants == "*":
            pairs = [(m, t) for m, _, types in MODULES for t in types]
        else:
            pairs = [(m, t) for m, types in grants.items() for t in types]
        for module_code, type_code in pairs:
            cur = await conn.execute(
                "INSERT INTO role_permission (role_id, permission_id) "
                "SELECT r.id, p.id FROM role r, permission p "
                "JOIN application_module m ON m.id = p.module_id "
                "JOIN permission_type t ON t.id = p.permission_type_id "
                "WHERE r.code = %s AND m.code = %s AND t.code = %s "
                "ON CONFLICT (role_id, permission_id) DO UPDATE SET active = true "
                "WHERE NOT role_permission.active",
                (code, module_code, type_code),
            )
            counts["grants"] += cur.rowcount

    return counts


async def main() -> int:
    parser = argparse.ArgumentParser(description="Seed permission catalog and system roles")
    parser.add_argument("--dry-run", action="store_true", help="Roll back instead of committing")
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings)

    async with await AsyncConnection.connect(settings.database_url) as conn:
        counts = await seed(conn)
        if args.dry_run:
            await conn.rollback()
            logger.info("Dry run, rolled back: %s", counts)
        else:
            await conn.commit()
            logger.info("Seeded catalog: %s", counts)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
