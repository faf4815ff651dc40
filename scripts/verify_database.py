#!/usr/bin/env python3
"""
Database verification script.

Checks that the configured database is reachable, that every registered
table exists, and that a resource survives the soft-delete round trip
(create, remove, restore, hard-remove).

Usage:
    python scripts/verify_database.py
    python scripts/verify_database.py --clean    # also wipe every table (not in prod)
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from sqlalchemy import inspect, select

from admin_service.config.settings import get_settings
from admin_service.domain.exceptions import NotFound
from admin_service.infrastructure.database import db
from admin_service.infrastructure.database.models import Testimonial
from admin_service.infrastructure.database.registry import ENTITY_REGISTRY, clean_database
from admin_service.services import build_service


async def verify_connection():
    print("1. Verifying database connection...")

    settings = get_settings()

    if not settings.database_url:
        print("   ERROR: DATABASE_URL not configured")
        return False

    try:
        await db.connect(
            url=settings.database_url.get_secret_value(),
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
            pool_pre_ping=True,
            echo_sql=settings.db_echo_sql,
            isolation_level=settings.db_isolation_level,
        )
        healthy = await db.health_check()
    except Exception as e:
        print(f"   ERROR: Failed to connect - {e}")
        return False

    if not healthy:
        print("   ERROR: Health check failed")
        return False

    stats = db.get_pool_stats()
    print("   SUCCESS: Connected to database")
    print(f"   Pool: {stats}")
    return True


async def verify_tables():
    print("\n2. Verifying tables...")

    async with db.engine.connect() as conn:
        existing = set(await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names()))

    missing = [kind.model.__tablename__ for kind in ENTITY_REGISTRY.values() if kind.model.__tablename__ not in existing]
    if missing:
        print(f"   ERROR: Missing tables: {', '.join(missing)}")
        print("   Run: alembic upgrade head")
        return False

    if "alembic_version" not in existing:
        print("   WARNING: alembic_version table not found; schema was not created by migrations")

    print(f"   SUCCESS: {len(ENTITY_REGISTRY)} resource tables present")
    return True


async def verify_soft_delete_round_trip():
    print("\n3. Verifying soft-delete round trip...")

    try:
        async with db.session() as session:
            service = build_service("testimonial", session)

            record = await service.create({"name": "Verificação", "text": "Teste de infraestrutura"})
            id = record["id"]
            print(f"   SUCCESS: Created testimonial (id: {id})")

            await service.remove(id)
            row = (await session.execute(select(Testimonial).where(Testimonial.id == id))).scalar_one()
            assert row.deleted is not None, "row should carry a deletion timestamp"
            try:
                await service.find_one(id)
                raise AssertionError("removed row should not be visible")
            except NotFound:
                pass
            print("   SUCCESS: Removed row kept and hidden")

            assert await service.restore([id]) == {"count": 1}
            await service.find_one(id)
            print("   SUCCESS: Restored row visible again")

            assert await service.hard_remove([id]) == {"count": 1}
            row = (await session.execute(select(Testimonial).where(Testimonial.id == id))).scalar_one_or_none()
            assert row is None, "hard-removed row should be gone"
            print("   SUCCESS: Hard-removed row gone")

        return True
    except Exception as e:
        print(f"   ERROR: Round trip failed - {e}")
        import traceback
        traceback.print_exc()
        return False


async def clean():
    print("\n4. Cleaning database...")

    try:
        async with db.session() as session:
            counts = await clean_database(session)
    except RuntimeError as e:
        print(f"   ERROR: {e}")
        return False

    for resource, count in counts.items():
        print(f"   - {resource}: {count} row(s) deleted")
    return True


async def main(argv=None):
    parser = argparse.ArgumentParser(description="Verify the admin service database.")
    parser.add_argument("--clean", action="store_true", help="delete every row of every registered table")
    args = parser.parse_args(argv)

    print("=" * 60)
    print("Database Verification")
    print("=" * 60)

    results = [("Connection", await verify_connection())]

    if results[-1][1]:
        results.append(("Tables", await verify_tables()))

        if results[-1][1]:
            results.append(("Soft Delete", await verify_soft_delete_round_trip()))
            if args.clean:
                results.append(("Clean", await clean()))

    if db.is_connected:
        await db.disconnect()

    print("\n" + "=" * 60)
    all_passed = True
    for check_name, passed in results:
        print(f"{check_name:20} {'PASS' if passed else 'FAIL'}")
        all_passed = all_passed and passed
    print("=" * 60)

    return 0 if all_passed else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
