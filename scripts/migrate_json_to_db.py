#!/usr/bin/env python3
"""
Copy saved bookmarks from the JSON file store to the SQLite store.

Usage:
    python scripts/migrate_json_to_db.py --json data/store.json --db data/jobfeed.db
"""

import argparse
import json
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from jobfeed.bookmarks import BOOKMARKS_KEY
from jobfeed.database import SqlKeyValueStore
from jobfeed.schema import is_valid_job
from jobfeed.storage import JsonFileStore


def migrate(json_path: Path, db_path: Path, dry_run: bool = False, force: bool = False) -> bool:
    """
    Migrate the bookmarks slot from JSON to the database.

    Args:
        json_path: Path to JSON store file
        db_path: Path to SQLite database file
        dry_run: If True, don't write to database
        force: Overwrite bookmarks already present in the database

    Returns:
        True when there was nothing to do or the copy succeeded
    """
    print(f"Loading bookmarks from {json_path}...")
    raw = JsonFileStore(json_path).get_item(BOOKMARKS_KEY)
    if raw is None:
        print("No bookmarks stored in JSON file, nothing to migrate")
        return True

    try:
        bookmarks = json.loads(raw)
    except json.JSONDecodeError as e:
        print(f"❌ Stored bookmarks are not valid JSON: {e}")
        return False
    if not isinstance(bookmarks, list):
        print("❌ Stored bookmarks are not a list")
        return False

    valid = [b for b in bookmarks if is_valid_job(b)]
    skipped = len(bookmarks) - len(valid)
    print(f"Found {len(bookmarks)} bookmarks ({skipped} without a numeric id will be skipped)")

    if dry_run:
        print("\n[DRY RUN] Would migrate the following bookmarks:")
        for i, job in enumerate(valid[:5], 1):
            print(f"  {i}. #{job['id']}: {job.get('company_name')} - {job.get('title')}")
        if len(valid) > 5:
            print(f"  ... and {len(valid) - 5} more")
        return True

    print(f"\nOpening database at {db_path}...")
    db = SqlKeyValueStore(db_path)
    try:
        if db.get_item(BOOKMARKS_KEY) is not None and not force:
            print("⚠️  Database already has bookmarks, use --force to overwrite")
            return False
        db.set_item(BOOKMARKS_KEY, json.dumps(valid, ensure_ascii=False))
    finally:
        db.close()

    print("\n✅ Migration complete!")
    print(f"   Migrated: {len(valid)}")
    print(f"   Skipped:  {skipped}")
    return True


def main():
    parser = argparse.ArgumentParser(description="Migrate bookmarks from JSON to database")
    parser.add_argument("--json", type=Path, default=Path("data/store.json"),
                       help="Path to JSON store file")
    parser.add_argument("--db", type=Path, default=Path("data/jobfeed.db"),
                       help="Path to SQLite database file")
    parser.add_argument("--dry-run", action="store_true",
                       help="Show what would be migrated without writing")
    parser.add_argument("--force", action="store_true",
                       help="Overwrite bookmarks already in the database")

    args = parser.parse_args()

    if not args.json.exists():
        print(f"❌ JSON file not found: {args.json}")
        sys.exit(1)

    if not migrate(args.json, args.db, dry_run=args.dry_run, force=args.force):
        sys.exit(1)


if __name__ == "__main__":
    main()
