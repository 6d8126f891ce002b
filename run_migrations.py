#!/usr/bin/env python3
"""
Apply database migrations for the order history backend.
Usage: python3 run_migrations.py [revision]
"""
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy.exc import OperationalError


def run_migrations(revision: str = "head") -> None:
    """Upgrade the configured database to `revision`."""
    alembic_dir = Path(__file__).parent / "gigaeats"
    config = Config(str(alembic_dir / "alembic.ini"))
    config.set_main_option("script_location", str(alembic_dir / "migrations"))

    print(f"Applying migrations up to {revision}...")
    try:
        command.upgrade(config, revision)
    except OperationalError as e:
        print("Could not reach the database:")
        print(f"   {e.orig}")
        print("\nCheck DATABASE_URL / DB_* in your environment or .env")
        sys.exit(1)
    print("Migrations applied.")


if __name__ == "__main__":
    run_migrations(sys.argv[1] if len(sys.argv) > 1 else "head")
