"""Storefront management CLI.

Usage:
    python src/manage.py setup-db     # Create all tables
    python src/manage.py drop-db      # Drop all tables
    python src/manage.py seed-admin   # Create the admin account from ADMIN_* variables
"""

import argparse
import os
import sys


def _domain():
    from storefront.domain import storefront

    storefront.init()
    return storefront


def setup_database():
    from storefront.utils.db import setup_db

    domain = _domain()
    print("Creating storefront database schema...")
    touched = setup_db(domain)
    print(f"  Schema ready on: {', '.join(touched) or 'no relational providers configured'}")


def drop_database():
    from storefront.utils.db import drop_db

    domain = _domain()
    print("Dropping storefront database schema...")
    touched = drop_db(domain)
    print(f"  Schema dropped on: {', '.join(touched) or 'no relational providers configured'}")


def seed_admin(email=None, password=None, name=None) -> str:
    """Create the admin account unless one with that email already exists; return its id."""
    from protean.utils.globals import current_domain

    from storefront.identity.account import Account, AccountRole
    from storefront.identity.registration import RegisterAccount

    email = email or os.getenv("ADMIN_EMAIL")
    password = password or os.getenv("ADMIN_PASSWORD")
    name = name or os.getenv("ADMIN_NAME", "Administrator")
    if not email or not password:
        raise SystemExit("ADMIN_EMAIL and ADMIN_PASSWORD must be set")

    existing = current_domain.repository_for(Account).find_by_email(email)
    if existing is not None:
        print(f"Admin {existing.email} already exists.")
        return str(existing.id)

    account_id = current_domain.process(
        RegisterAccount(name=name, email=email, password=password, role=AccountRole.ADMIN.value),
        asynchronous=False,
    )
    print(f"Admin {email} created.")
    return account_id


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    seed_parser = subparsers.add_parser("seed-admin", help="Create the admin account")
    seed_parser.add_argument("--email", help="Defaults to ADMIN_EMAIL")
    seed_parser.add_argument("--password", help="Defaults to ADMIN_PASSWORD")
    seed_parser.add_argument("--name", help="Defaults to ADMIN_NAME or 'Administrator'")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed-admin":
        domain = _domain()
        with domain.domain_context():
            seed_admin(args.email, args.password, args.name)


if __name__ == "__main__":
    sys.exit(main())
