"""
Studio Manager database initialisation.

Creates the tables, the studio settings row, the default session slots and
the default membership plans.
"""

import logging
import sys
from decimal import Decimal
from pathlib import Path
from typing import List

from app.core.config import settings
from app.database.base_class import Base
from app.database.session import engine, db_session, check_database_connection
from app.models import MembershipPlan, PlanType, SessionSlot, SessionType
from app.repositories import JsonFileRepository, Repository, SqlRepository
from app.services.studio_settings import SettingsStore

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# =============================================================================
# DEFAULT DATA
# =============================================================================

DEFAULT_SLOTS = [
    {"start_time": "07:30", "end_time": "08:30", "display_name": "Morning 7:30 AM"},
    {"start_time": "08:45", "end_time": "09:45", "display_name": "Morning 8:45 AM"},
    {"start_time": "10:00", "end_time": "11:00", "display_name": "Late Morning 10:00 AM"},
    {"start_time": "19:30", "end_time": "20:30", "display_name": "Evening 7:30 PM"},
]

DEFAULT_PLANS = [
    {
        "name": "Monthly",
        "type": PlanType.MONTHLY,
        "price": Decimal("2100"),
        "duration_months": 1,
        "description": "One month of unlimited weekday classes in your slot",
    },
    {
        "name": "Quarterly",
        "type": PlanType.QUARTERLY,
        "price": Decimal("5500"),
        "duration_months": 3,
        "description": "Three months of unlimited weekday classes in your slot",
    },
    {
        "name": "Semi-Annual",
        "type": PlanType.SEMI_ANNUAL,
        "price": Decimal("10000"),
        "duration_months": 6,
        "description": "Six months of unlimited weekday classes in your slot",
    },
]


# =============================================================================
# 1. TABLES
# =============================================================================

def create_all_tables() -> bool:
    """
    Create every table of the schema.

    Returns:
        True on success, False otherwise
    """
    try:
        logger.info("📦 Creating tables...")
        Base.metadata.create_all(bind=engine)

        table_names = list(Base.metadata.tables.keys())
        logger.info(f"✅ {len(table_names)} tables created: {', '.join(sorted(table_names))}")
        return True
    except Exception as e:
        logger.error(f"❌ Error while creating tables: {e}")
        return False


def drop_all_tables() -> bool:
    """
    Drop every table.

    ⚠️ Irreversible. Used for tests or a full reset.
    """
    try:
        logger.warning("❗️ Dropping all tables...")
        Base.metadata.drop_all(bind=engine)
        logger.info("✅ All tables dropped")
        return True
    except Exception as e:
        logger.error(f"❌ Error while dropping tables: {e}")
        return False


# =============================================================================
# 2. SEED DATA
# =============================================================================

def init_settings(repo: Repository) -> None:
    """Create the settings row with defaults when missing."""
    store = SettingsStore(repo)
    studio = store.get()
    if store.migrated_on_load:
        store.save(studio)
    logger.info(f"⚙️ Studio settings ready: {studio.studio_name}")


def init_default_slots(repo: Repository) -> List[SessionSlot]:
    """Create the four default slots (10 regular + 1 exception place each)."""
    if repo.count(SessionSlot):
        logger.info("⏭️ Session slots already exist, skipping")
        return repo.list(SessionSlot, order_by="start_time")

    slots = []
    for data in DEFAULT_SLOTS:
        slot = SessionSlot(
            **data,
            capacity=10,
            exception_capacity=1,
            session_type=SessionType.OFFLINE,
            is_active=True,
        )
        repo.add(slot)
        slots.append(slot)
        logger.info(f"   + Slot {slot.display_name}")
    logger.info(f"✅ {len(slots)} session slots created")
    return slots


def init_default_plans(repo: Repository) -> List[MembershipPlan]:
    if repo.count(MembershipPlan):
        logger.info("⏭️ Membership plans already exist, skipping")
        return repo.list(MembershipPlan, order_by="duration_months")

    plans = []
    for data in DEFAULT_PLANS:
        plan = MembershipPlan(
            **data,
            allowed_session_types=[SessionType.OFFLINE.value],
            features=["Unlimited classes in your slot", "Monday to Friday"],
            is_active=True,
        )
        repo.add(plan)
        plans.append(plan)
        logger.info(f"   + Plan {plan.name} ({plan.price} / {plan.duration_months} month(s))")
    logger.info(f"✅ {len(plans)} membership plans created")
    return plans


def seed_defaults(repo: Repository) -> None:
    """Settings, slots and plans, in one transaction. Safe to run twice."""
    with repo.transaction():
        init_settings(repo)
        init_default_slots(repo)
        init_default_plans(repo)


# =============================================================================
# 3. FULL INITIALISATION
# =============================================================================

def init_database(drop_existing: bool = False) -> bool:
    """
    Initialise the SQL database.

    Steps:
    1. Check the connection
    2. (Optional) drop the existing tables
    3. Create every table
    4. Seed settings, slots and plans

    Example:
        >>> from app.database.init_db import init_database
        >>> init_database()
        True
    """
    logger.info("=" * 60)
    logger.info("🚀 STUDIO MANAGER DATABASE INITIALISATION")
    logger.info("=" * 60)

    logger.info("📡 Checking the database connection...")
    if not check_database_connection():
        logger.error("❌ Cannot reach the database")
        logger.error("   Check that DATABASE_URL is correct")
        return False
    logger.info("✅ Connection OK")

    if drop_existing:
        logger.warning("⚠️ DROP_EXISTING mode enabled")
        if not drop_all_tables():
            return False

    if not create_all_tables():
        return False

    try:
        with db_session() as db:
            seed_defaults(SqlRepository(db))
    except Exception as e:
        logger.error(f"❌ Error while seeding default data: {e}")
        return False

    logger.info("=" * 60)
    logger.info("🎉 Initialisation complete")
    logger.info("=" * 60)
    return True


def init_local_store(path: Path) -> bool:
    """Seed a local JSON store file."""
    logger.info(f"🚀 Initialising local store {path}")
    seed_defaults(JsonFileRepository(path))
    logger.info("🎉 Local store ready")
    return True


# =============================================================================
# 4. CLI ENTRY POINT
# =============================================================================

def main():
    """
    Command line entry point.

    Usage:
        python -m app.database.init_db
        python -m app.database.init_db --drop
        python -m app.database.init_db --local
    """
    import argparse

    parser = argparse.ArgumentParser(description="Initialise the Studio Manager database")
    parser.add_argument(
        '--drop',
        action='store_true',
        help="Drop the existing tables first (WARNING!)"
    )
    parser.add_argument(
        '--local',
        action='store_true',
        help=f"Seed the local JSON store ({settings.LOCAL_STORE_PATH}) instead of the SQL database"
    )
    args = parser.parse_args()

    if args.local or settings.uses_local_store:
        sys.exit(0 if init_local_store(Path(settings.LOCAL_STORE_PATH)) else 1)

    if args.drop:
        print("\n⚠️  WARNING: every existing table will be DROPPED.")
        print("   All data will be lost.\n")
        response = input("Are you sure? (yes/no): ")
        if response.lower() != 'yes':
            print("Cancelled.")
            sys.exit(0)

    sys.exit(0 if init_database(drop_existing=args.drop) else 1)


if __name__ == "__main__":
    main()
