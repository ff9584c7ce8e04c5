"""Storefront management CLI.

Usage:
    python src/manage.py setup-db                 # Create all tables
    python src/manage.py drop-db                  # Drop all tables
    python src/manage.py release-stale-orders     # Cancel unpaid orders past their TTL
"""

import argparse
import sys


def _domain():
    from storefront.domain import storefront

    storefront.init()
    return storefront


def setup_database():
    from storefront.utils.db import setup_db

    print("Creating storefront database schema...")
    setup_db(_domain())
    print("Done.")


def drop_database():
    from storefront.utils.db import drop_db

    print("Dropping storefront database schema...")
    drop_db(_domain())
    print("Done.")


def release_stale_orders(older_than_minutes=None):
    from storefront.ordering.reconciliation import release_stale_orders as release

    domain = _domain()
    with domain.domain_context():
        released = release(older_than_minutes=older_than_minutes)
    print(f"Released {released} stale order(s).")


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    release_parser = subparsers.add_parser(
        "release-stale-orders",
        help="Cancel PENDING orders older than the TTL and return their stock",
    )
    release_parser.add_argument(
        "--older-than-minutes",
        type=int,
        default=None,
        help="Override PENDING_ORDER_TTL_MINUTES",
    )

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "release-stale-orders":
        release_stale_orders(args.older_than_minutes)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
