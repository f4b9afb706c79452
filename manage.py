#!/usr/bin/env python3
"""
Workforce Docs - database maintenance commands.

    python manage.py verify
    python manage.py wipe --yes
    python manage.py import-skeleton
    python manage.py setup-storage
    python manage.py create-demo-data [--seed N] [--weeks N]
"""

import argparse
import asyncio
import sys

from sqlalchemy import inspect, text

from workforce.config import get_settings
from workforce.database import AsyncSessionLocal, drop_db, engine, init_db
from workforce.services.demo import DEMO_PASSWORD, DemoDataGenerator, ensure_reference_data
from workforce.services.storage import RAMS_BUCKET, StorageService

# A database without this table is not one of ours
EXPECTED_TABLE = "profiles"


class WorkforceMaintenance:
    def __init__(self):
        self.settings = get_settings()

    def print_header(self, title):
        print("\n" + "=" * 70)
        print(f"           {self.settings.app_name.upper()} - {title}")
        print("=" * 70)

    async def list_tables(self):
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
            return await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

    async def verify(self):
        """Check the connection and that this is the expected database"""
        print("\n🔍 Verifying database...")
        tables = await self.list_tables()
        print("✅ Connected to database")
        print(f"📊 Database: {engine.url.render_as_string(hide_password=True)}\n")

        if tables:
            print(f"Current tables ({len(tables)}):")
            for name in sorted(tables):
                print(f"   - {name}")
        else:
            print("ℹ️  No tables found")

        if EXPECTED_TABLE in tables:
            print(f'\n✅ Found "{EXPECTED_TABLE}" table - this is the correct database')
            return True
        print(f'\n❌ No "{EXPECTED_TABLE}" table found')
        return False

    async def wipe(self, confirmed):
        """Drop every table after the safety check"""
        self.print_header("DATABASE WIPE")
        if not confirmed:
            print("❌ Refusing to wipe without --yes")
            return False
        if not await self.verify():
            print("⚠️  SAFETY CHECK FAILED - will not proceed with wipe")
            return False

        print("\n⚠️  Dropping all tables...")
        await drop_db()
        remaining = await self.list_tables()
        print("✅ Database wiped successfully!")
        print(f"   Remaining tables: {len(remaining)}")
        print("\n📋 Next step: python manage.py import-skeleton")
        return True

    async def import_skeleton(self):
        """Create the schema and the default roles and vehicle categories"""
        self.print_header("IMPORT SKELETON")
        print("\n📊 Creating tables...")
        await init_db()
        print("✅ Tables created")

        print("🌱 Seeding default roles and vehicle categories...")
        async with AsyncSessionLocal() as session:
            await ensure_reference_data(session)
        print("✅ Reference data ready")
        return True

    def setup_storage(self):
        """Create the local document buckets"""
        print("\n🚀 Setting up storage buckets...")
        storage = StorageService()
        folder = storage.root / RAMS_BUCKET
        if folder.is_dir():
            print(f'✅ Bucket "{RAMS_BUCKET}" already exists')
        else:
            print(f'📦 Creating bucket "{RAMS_BUCKET}"...')
            folder.mkdir(parents=True, exist_ok=True)
            print(f'✅ Bucket "{RAMS_BUCKET}" created at {folder}')
        return True

    async def create_demo_data(self, seed, weeks):
        """Seed the demo organisation"""
        self.print_header("CREATE DEMO DATA")
        await init_db()
        self.setup_storage()

        async with AsyncSessionLocal() as session:
            generator = DemoDataGenerator(session, seed=seed, weeks=weeks)
            async for stage in generator.run():
                print(f"   ⏳ {stage}")
            await session.commit()

        print("\n✅ Demo data created:")
        for name, count in generator.counts.items():
            print(f"   - {name}: {count}")
        print(f"\n🔑 Demo users log in as firstname.surname@{self.settings.demo_email_domain} "
              f"with password '{DEMO_PASSWORD}'")
        return True

    async def run(self, args):
        try:
            if args.command == "verify":
                return await self.verify()
            if args.command == "wipe":
                return await self.wipe(args.yes)
            if args.command == "import-skeleton":
                return await self.import_skeleton()
            if args.command == "setup-storage":
                return self.setup_storage()
            if args.command == "create-demo-data":
                return await self.create_demo_data(args.seed, args.weeks)
            return False
        finally:
            await engine.dispose()


def build_parser():
    parser = argparse.ArgumentParser(description="Workforce Docs database maintenance")
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("verify", help="Connect and list tables")
    wipe = commands.add_parser("wipe", help="Drop every table")
    wipe.add_argument("--yes", action="store_true", help="Confirm the wipe")
    commands.add_parser("import-skeleton", help="Create tables and seed reference data")
    commands.add_parser("setup-storage", help="Create local storage buckets")
    demo = commands.add_parser("create-demo-data", help="Seed demo users, vehicles and paperwork")
    demo.add_argument("--seed", type=int, default=2025)
    demo.add_argument("--weeks", type=int, default=4)
    return parser


def main():
    """Main entry point"""
    args = build_parser().parse_args()
    try:
        success = asyncio.run(WorkforceMaintenance().run(args))
    except KeyboardInterrupt:
        print("\n\n👋 Interrupted")
        success = False
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
