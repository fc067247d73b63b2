"""Storefront management CLI.

Usage:
    python src/manage.py setup-db        # Create all tables
    python src/manage.py drop-db         # Drop all tables
    python src/manage.py create-admin    # Promote or create the ADMIN_EMAIL account
        [--email admin@example.com] [--name "Store Admin"]
"""

import argparse
import os
import sys

import structlog

logger = structlog.get_logger(__name__)


def _domain():
    from storefront.domain import storefront

    storefront.init()
    return storefront


def setup_databases():
    """Create database schemas for every SQL provider."""
    from storefront.utils.db import setup_db

    print("Initializing storefront domain...")
    domain = _domain()
    print("Creating storefront database schema...")
    providers = setup_db(domain)
    print(f"  schema ready on: {', '.join(providers) or 'no SQL providers configured'}")
    print("Done.")


def drop_databases():
    """Drop database schemas for every SQL provider."""
    from storefront.utils.db import drop_db

    print("Initializing storefront domain...")
    domain = _domain()
    print("Dropping storefront database schema...")
    providers = drop_db(domain)
    print(f"  schema dropped on: {', '.join(providers) or 'no SQL providers configured'}")
    print("Done.")


def create_admin(email=None, full_name=None, domain=None):
    """Promote the account with ``email`` to admin, registering it if needed.

    Returns the admin account's id.
    """
    from storefront.identity.account import Account, Role

    email = email or os.getenv("ADMIN_EMAIL")
    full_name = full_name or os.getenv("ADMIN_NAME") or "Store Admin"
    if not email:
        raise SystemExit("ADMIN_EMAIL is not set and --email was not given")

    domain = domain or _domain()
    with domain.domain_context():
        repo = domain.repository_for(Account)
        account = repo.find_by_email(email)
        if account is None:
            account = Account.register(full_name=full_name, email=email, role=Role.ADMIN.value)
            logger.info("Admin account created", account_id=str(account.id), email=account.email)
        elif account.is_admin:
            logger.info("Account is already an admin", account_id=str(account.id), email=account.email)
        else:
            account.grant_admin()
            logger.info("Account promoted to admin", account_id=str(account.id), email=account.email)
        repo.add(account)
        return str(account.id)


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    admin_parser = subparsers.add_parser("create-admin", help="Create or promote the store administrator")
    admin_parser.add_argument("--email", help="Defaults to ADMIN_EMAIL")
    admin_parser.add_argument("--name", help="Defaults to ADMIN_NAME")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    elif args.command == "create-admin":
        account_id = create_admin(email=args.email, full_name=args.name)
        print(f"Admin account: {account_id}")
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
