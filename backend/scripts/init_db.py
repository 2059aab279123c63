#!/usr/bin/env python3
"""
Database Initialization Script for UniRate

This script:
1. Tests database connectivity
2. Creates any missing tables
3. Seeds the admin account and sample catalog if asked

Usage:
    python scripts/init_db.py              # Check + create tables
    python scripts/init_db.py --check      # Only check connectivity
    python scripts/init_db.py --seed       # Also seed admin and catalog
    python scripts/init_db.py --status     # Show table status
"""

import asyncio
import sys
import argparse
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import inspect  # noqa: E402

from app.core.database import check_connection, close_db, get_engine, init_db  # noqa: E402


async def test_connection() -> bool:
    """Test database connectivity"""
    print("\n[InitDB] Testing database connection...")
    try:
        await check_connection()
    except Exception as e:
        print(f"[InitDB] ERROR: Database connection failed: {e}")
        return False
    print("[InitDB] Database connection successful!")
    return True


async def show_table_status():
    """Show current table status"""
    print("\n[InitDB] Database Table Status:")
    print("-" * 50)

    def describe(sync_conn):
        inspector = inspect(sync_conn)
        return {name: len(inspector.get_columns(name)) for name in inspector.get_table_names()}

    async with get_engine().connect() as conn:
        tables = await conn.run_sync(describe)

    print(f"Total tables: {len(tables)}")
    for name in sorted(tables):
        print(f"  - {name} ({tables[name]} columns)")


async def main():
    """Main initialization function"""
    parser = argparse.ArgumentParser(description="UniRate Database Initialization")
    parser.add_argument("--check", action="store_true", help="Only check connectivity")
    parser.add_argument("--seed", action="store_true", help="Include seed data")
    parser.add_argument("--status", action="store_true", help="Show table status")
    args = parser.parse_args()

    print("=" * 50)
    print("  UniRate - Database Initialization")
    print("=" * 50)

    try:
        if not await test_connection():
            print("\n[InitDB] FAILED: Cannot connect to database")
            return 1

        if args.check:
            print("\n[InitDB] Connection check completed!")
            return 0

        if args.status:
            await show_table_status()
            return 0

        await init_db()
        print("[InitDB] Database tables created/verified!")

        if args.seed:
            from app.db import seed_all
            await seed_all()

        await show_table_status()
    finally:
        await close_db()

    print("\n" + "=" * 50)
    print("  Database Initialization Complete!")
    print("=" * 50)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
