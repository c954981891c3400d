"""Create the Taskboard tables, optionally dropping them first and loading demo data."""
import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import inspect

from taskboard.database import engine, Base
import taskboard.models  # noqa: F401 - registers all models


def init_db(bind=engine, reset: bool = False) -> list:
    if reset:
        print("Dropping existing tables...")
        Base.metadata.drop_all(bind=bind)
    Base.metadata.create_all(bind=bind)
    return sorted(inspect(bind).get_table_names())


def main():
    parser = argparse.ArgumentParser(description="Initialize the Taskboard database")
    parser.add_argument("--reset", action="store_true", help="Drop all tables before creating them")
    parser.add_argument("--seed", action="store_true", help="Load demo users, projects and tasks")
    args = parser.parse_args()

    tables = init_db(reset=args.reset)
    print(f"Database ready: {', '.join(tables)}")

    if args.seed:
        from scripts.seed_data import seed
        seed()


if __name__ == "__main__":
    main()
