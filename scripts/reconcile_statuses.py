"""
Correct stale tournament and league statuses in Firestore.

- Streams every tournament and league document.
- Computes the status each one should have right now.
- Writes the suggested status for every stale document (skipped with --dry-run).
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

import firebase_admin
from firebase_admin import credentials, firestore

# Add the project root to the Python path to allow importing 'pickletrack'
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from pickletrack.status.tasks import reconcile_event_statuses  # noqa: E402


def initialize_firebase():
    """Initializes the Firebase Admin SDK."""
    cred = None
    cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred = credentials.Certificate(json.loads(cred_json))
        except (json.JSONDecodeError, ValueError) as e:
            print(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")
            return False
    else:
        cred_path = project_root / "firebase_credentials.json"
        if cred_path.exists():
            try:
                cred = credentials.Certificate(str(cred_path))
            except ValueError as e:
                print(f"Error loading credentials from file: {e}")
                return False

    if not cred:
        print("Could not find Firebase credentials in file or environment variable.")
        return False

    if not firebase_admin._apps:
        firebase_admin.initialize_app(cred)
    return True


def main(argv=None):
    """Run the status reconciliation job."""
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report stale statuses without writing them.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every decision.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not initialize_firebase():
        return 1

    changes = reconcile_event_statuses(firestore.client(), dry_run=args.dry_run)
    for change in changes:
        print(f"{change['collection']}/{change['id']}: {change['from']} -> {change['to']}")
    print(f"\n{len(changes)} stale statuses {'found' if args.dry_run else 'updated'}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
