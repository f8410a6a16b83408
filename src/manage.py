"""Bookshop database management CLI.

Creates or drops the bookshop schema on the configured SQL provider.
PROTEAN_ENV picks the overlay from domain.toml; the default memory
provider has no schema and is skipped.

Usage:
    PROTEAN_ENV=production python src/manage.py setup-db   # Create all tables
    PROTEAN_ENV=production python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    from bookshop.domain import bookshop
    from bookshop.utils.db import setup_db

    print("Initializing bookshop domain...")
    bookshop.init()
    print("Creating bookshop database schema...")
    setup_db(bookshop)
    print("Done.")


def drop_database():
    from bookshop.domain import bookshop
    from bookshop.utils.db import drop_db

    print("Initializing bookshop domain...")
    bookshop.init()
    print("Dropping bookshop database schema...")
    drop_db(bookshop)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Bookshop database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
