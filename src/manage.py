"""Inkpost database management CLI.

Creates and drops the relational schemas behind the identity and ordering
contexts. Contexts configured with the memory provider are skipped.

Usage:
    python src/manage.py setup-db                      # Create all tables
    python src/manage.py drop-db --domain ordering     # Drop one context's tables
"""

import argparse
import sys

from shared.db import drop_db, setup_db

DOMAIN_NAMES = ["identity", "ordering"]


def _load_domains(names=None):
    from identity.domain import identity
    from ordering.domain import ordering

    all_domains = {"identity": identity, "ordering": ordering}
    return {name: all_domains[name] for name in (names or DOMAIN_NAMES)}


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    for name, domain in _load_domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Creating {name} database schema...")
        touched = setup_db(domain)
        if touched:
            print(f"  {name} schema ready ({', '.join(touched)}).")
        else:
            print(f"  {name} uses no relational database, nothing to create.")

    print("Done.")


def drop_databases(domains=None):
    """Drop database schemas for the specified (or all) domains."""
    for name, domain in _load_domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Dropping {name} database schema...")
        touched = drop_db(domain)
        if touched:
            print(f"  {name} schema dropped ({', '.join(touched)}).")
        else:
            print(f"  {name} uses no relational database, nothing to drop.")

    print("Done.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Inkpost database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for command, help_text in (("setup-db", "Create all database tables"), ("drop-db", "Drop all database tables")):
        subparser = subparsers.add_parser(command, help=help_text)
        subparser.add_argument(
            "--domain",
            choices=DOMAIN_NAMES,
            nargs="*",
            help="Specific domain(s) to act on (default: all)",
        )

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
