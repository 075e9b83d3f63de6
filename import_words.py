#!/usr/bin/env python3
"""
Import word pairs from CSV into the dictionary database.

Usage:
    python import_words.py --csv data/words.csv

The CSV needs ``primary`` and ``target`` columns (``transcription`` is
optional). Legacy exports with ``Russian text`` / ``Hebrew text`` /
``transcription text`` columns are accepted as well.
"""

import sys
import os
import argparse

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from ulpan_drill import db, stats


def main() -> None:
    parser = argparse.ArgumentParser(description="Import a word-pair CSV into the dictionary database")
    parser.add_argument(
        "--csv",
        default="data/words.csv",
        help="Path to the CSV file (default: data/words.csv)",
    )
    args = parser.parse_args()

    if not os.path.exists(args.csv):
        print(f"❌ CSV file not found: {args.csv}")
        sys.exit(1)

    # Ensure tables exist
    if not db.is_db_initialized():
        db.init_db()
        print("✅ Database initialized")

    count = db.import_words_csv(args.csv)
    if count == 0:
        print("ℹ️  All word pairs already imported (0 new)")
    else:
        print(f"🎉 Successfully imported {count} word pairs!")

    # Show stats
    words = db.load_words()
    totals = stats.collection_accuracy(words)
    print(f"\n📊 Dictionary Stats:")
    print(f"   Total words: {len(words)}")
    print(f"   Answers so far: {totals.total_answers}")
    print(f"   Accuracy: {totals.accuracy_percent}%")


if __name__ == "__main__":
    main()
