#!/usr/bin/env python3
"""Migration script to attach legacy journal lines to typed accounts.

Older books recorded "other" journal lines with a free-text account name and
no account in the chart of accounts, so their lines were classified by
keywords in the name at report time. Reports now only classify through the
chart of accounts, which leaves such lines unclassified.

This migration, once per database:
- finds "other" lines with no account_id whose name matches no account
  visible to the line's owner
- infers an account class from keywords in the name
  (cash/bank/inventory/receivable/asset -> asset,
  payable/liability/loan -> liability, capital/equity/owner -> equity,
  revenue/sales/income -> income, expense/cost/purchase -> expense)
- creates one owner account per inferred name and links the lines to it

Names that match no keyword are listed and left for manual review.

Usage:
    python migrations/migrate_infer_account_types.py [--db-path PATH] [--dry-run]
"""

import sys
from pathlib import Path

# Add src to path so we can import ledgerbook modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import func, or_
from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.database.models import Account, JournalEntry, JournalEntryLine
from ledgerbook.domain.accounts import infer_account_class


def find_unlinked_lines(session) -> dict[tuple[str, str], list[JournalEntryLine]]:
    """Group "other" lines without an account by (owner, account name).

    Lines whose name already matches an account visible to the owner are
    skipped; the report classifier resolves those by name. Names differing
    only in case share one group under the first spelling seen.

    Args:
        session: SQLAlchemy session

    Returns:
        Mapping of (owner, account name) to the lines carrying that name
    """
    lines = (
        session.query(JournalEntryLine, JournalEntry.owner)
        .join(JournalEntry, JournalEntryLine.journal_entry_id == JournalEntry.id)
        .filter(JournalEntryLine.account_type == "other", JournalEntryLine.account_id.is_(None))
        .order_by(JournalEntryLine.id)
        .all()
    )

    groups: dict[tuple[str, str], list[JournalEntryLine]] = {}
    spellings: dict[tuple[str, str], str] = {}
    for line, owner in lines:
        name = (line.account_name or "").strip()
        if not name:
            continue
        known = (
            session.query(Account)
            .filter(
                or_(Account.owner == owner, Account.owner.is_(None)),
                func.lower(Account.name) == name.lower(),
            )
            .first()
        )
        if known is None:
            spelling = spellings.setdefault((owner, name.lower()), name)
            groups.setdefault((owner, spelling), []).append(line)
    return groups


def migrate_session(session, dry_run: bool = False) -> tuple[int, list[str]]:
    """Create inferred accounts and link their lines.

    Args:
        session: SQLAlchemy session
        dry_run: If True, report what would change without writing

    Returns:
        Tuple of (number of accounts created, names that could not be inferred)
    """
    created = 0
    unresolved = []

    for (owner, name), lines in sorted(find_unlinked_lines(session).items()):
        account_class = infer_account_class(name)
        if account_class is None:
            unresolved.append(name)
            continue

        print(f"  {owner}: '{name}' -> {account_class.value} ({len(lines)} line(s))")
        if dry_run:
            created += 1
            continue

        account = Account(owner=owner, name=name, type=account_class.value)
        session.add(account)
        session.flush()
        for line in lines:
            line.account_id = account.id
        created += 1

    if not dry_run:
        session.commit()
    return created, unresolved


def migrate_database(database_path: str | None = None, dry_run: bool = False) -> None:
    """Run the migration against a database file.

    Args:
        database_path: Path to database file. If None, uses default location.
        dry_run: If True, report what would change without writing

    Raises:
        Exception: If migration fails
    """
    db = create_sqlite_database(database_path=database_path)
    db.connect()

    try:
        print("Starting migration: inferring account types for unlinked journal lines...")
        session = db.session_factory()
        try:
            created, unresolved = migrate_session(session, dry_run=dry_run)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

        verb = "Would create" if dry_run else "Created"
        print(f"{verb} {created} account(s)")
        if unresolved:
            print("Could not infer a type for these names; create them with 'ledgerbook account create':")
            for name in sorted(set(unresolved)):
                print(f"  {name}")
        print("Migration completed successfully!")

    except Exception as e:
        print(f"Migration failed: {e}")
        raise
    finally:
        db.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Create typed accounts for journal lines that only carry a free-text account name"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides LEDGERBOOK_DB_PATH environment variable)",
    )
    parser.add_argument("--dry-run", action="store_true", help="Show changes without writing them")
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path, dry_run=args.dry_run)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
