#!/usr/bin/env python3
"""Generate test translations for scalability testing.

Usage:
    python scripts/generate_translations.py --count 100000 --locales en,fr,es --tags mobile,web
"""

import argparse
import os
import sys

# Add parent directory to path to import app modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app, db
from app.services.generator import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_COUNT,
    DEFAULT_LOCALES,
    DEFAULT_TAGS,
    generate_translations,
)


def _split(value):
    return [item.strip() for item in value.split(',') if item.strip()]


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Generate test translations for scalability testing')
    parser.add_argument('--count', type=int, default=DEFAULT_COUNT,
                        help='Number of translations to generate')
    parser.add_argument('--locales', type=_split, default=DEFAULT_LOCALES,
                        help='Comma-separated list of locales')
    parser.add_argument('--tags', type=_split, default=DEFAULT_TAGS,
                        help='Comma-separated list of tags')
    parser.add_argument('--batch-size', type=int, default=DEFAULT_BATCH_SIZE,
                        help='Rows per insert statement')
    args = parser.parse_args(argv)

    if not args.locales:
        parser.error('--locales must list at least one locale')
    if not args.tags:
        parser.error('--tags must list at least one tag')
    if args.batch_size < 1:
        parser.error('--batch-size must be at least 1')
    return args


def print_progress(batch_number, total_batches):
    print(f"\r  Batch {batch_number}/{total_batches}", end='', flush=True)
    if batch_number == total_batches:
        print()


def print_statistics(count, stats):
    print(f"\n✅ Generated {count} translations in {stats['elapsed_seconds']} seconds\n")

    print("Translation Statistics:")
    print(f"  Total translations: {stats['total_count']}")
    for locale, locale_count in stats['per_locale_counts'].items():
        print(f"  Locale '{locale}': {locale_count}")
    for tag, tag_count in stats['per_tag_counts'].items():
        print(f"  Tag '{tag}': {tag_count}")
    print(f"  Unique keys: {stats['unique_key_count']}")

    print("\nDatabase Size Information:")
    storage = stats['storage']
    if storage:
        print(f"  Translations table size: {storage['table_size']}")
        print(f"  Database size: {storage['database_size']}")
    else:
        print("  Database size information not available for this database type")


def main(argv=None):
    args = parse_args(argv)

    app = create_app(os.getenv('FLASK_ENV', 'development'))

    print(f"Generating {args.count} translations...")
    print(f"Locales: {', '.join(args.locales)}")
    print(f"Tags: {', '.join(args.tags)}")

    with app.app_context():
        try:
            stats = generate_translations(
                db.session, args.count, args.locales, args.tags,
                batch_size=args.batch_size, progress=print_progress
            )
        except Exception as e:
            print(f"\n❌ Generation failed: {type(e).__name__}: {e}")
            return 1

    print_statistics(args.count, stats)
    return 0


if __name__ == '__main__':
    sys.exit(main())
