#!/usr/bin/env python3
"""
Import a CSV file of flashcards into a card set.

Usage:
    python api/scripts/import_csv.py --user-id <sub> --set-id 12 cards.csv
    python api/scripts/import_csv.py --user-id <sub> --title "JLPT N5" cards.csv

The CSV uses the six-column export format (front word, hint, description,
back word, hint, description) with a header row. Rows with an empty front
or back word are skipped and listed in the summary.
"""
import sys
import logging
from pathlib import Path
from typing import Optional

# Add the api directory to the path so we can import vocadeck modules
api_dir = Path(__file__).parent.parent
sys.path.insert(0, str(api_dir))

from vocadeck.core.context import RequestContext
from vocadeck.core.database import get_store, init_db
from vocadeck.core.exceptions import VocadeckException
from vocadeck.services.card_service import import_csv
from vocadeck.services.card_set_service import create_card_set

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def import_csv_file(
    csv_path: str,
    user_id: str,
    card_set_id: Optional[int] = None,
    title: Optional[str] = None
) -> dict:
    """
    Import a CSV file into an existing card set, or into a new one named title.

    Returns:
        Dict with the target card set id and import counts
    """
    text = Path(csv_path).read_text(encoding="utf-8-sig")
    store = get_store()
    ctx = RequestContext(user_id=user_id)

    if card_set_id is None:
        card_set = create_card_set(store, ctx, title)
        card_set_id = card_set.id
        logger.info(f"Created card set {card_set_id} '{card_set.title}'")

    result = import_csv(store, ctx, card_set_id, text)
    return {
        'card_set_id': card_set_id,
        'imported': result.imported,
        'failed': result.failed,
        'skipped': [str(row) for row in result.skipped_rows],
        'errors': result.errors,
    }


def main():
    """Main entry point for the script."""
    import argparse

    parser = argparse.ArgumentParser(description="Import flashcards from a CSV file into a card set")
    parser.add_argument("csv_path", type=str, help="Path to the CSV file")
    parser.add_argument("--user-id", type=str, required=True, help="Owner of the card set")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--set-id", type=int, default=None, help="Existing card set to append to")
    target.add_argument("--title", type=str, default=None, help="Create a new card set with this title")
    args = parser.parse_args()

    if not Path(args.csv_path).exists():
        parser.error(f"CSV file not found: {args.csv_path}")

    init_db()

    try:
        result = import_csv_file(
            csv_path=args.csv_path,
            user_id=args.user_id,
            card_set_id=args.set_id,
            title=args.title
        )
    except VocadeckException as e:
        logger.error(f"Import failed: {type(e).__name__}: {e}")
        print(f"\n✗ Error: {e}")
        sys.exit(1)

    print("\n" + "="*60)
    print("IMPORT SUMMARY")
    print("="*60)
    print(f"Card set: {result['card_set_id']}")
    print(f"Imported: {result['imported']}")
    print(f"Failed: {result['failed']}")
    print(f"Skipped rows: {len(result['skipped'])}")
    print("="*60)

    for row in result['skipped']:
        print(f"  - skipped {row}")
    for error in result['errors']:
        print(f"  - {error}")

    if result['failed'] > 0:
        sys.exit(1)
    print("\n✓ Import completed successfully!")


if __name__ == "__main__":
    main()
