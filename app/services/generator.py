"""Bulk generation of synthetic translations for load testing.

Rows are written straight to the database in fixed-size batches, one
multi-row insert per batch, bypassing the translation cache. Keys are
``key_<index>`` so a run never collides with itself; collisions with rows
that already exist surface as the database's unique constraint error.
"""

import logging
import time
from datetime import datetime

from sqlalchemy import func, insert, text

from app.models import Translation

logger = logging.getLogger(__name__)

DEFAULT_COUNT = 100000
DEFAULT_LOCALES = ['en', 'fr', 'es', 'de', 'it']
DEFAULT_TAGS = ['mobile', 'desktop', 'web']
DEFAULT_BATCH_SIZE = 1000


def build_batch(start: int, size: int, locales: list, tags: list, now: datetime) -> list:
    """Rows for global indexes [start, start + size)."""
    rows = []
    for index in range(start, start + size):
        rows.append({
            'key': f'key_{index}',
            'locale': locales[index % len(locales)],
            'value': f'Translation {index}',
            'tag': tags[index % len(tags)],
            'created_at': now,
            'updated_at': now,
        })
    return rows


def generate_translations(session, count: int, locales: list, tags: list,
                          batch_size: int = DEFAULT_BATCH_SIZE, progress=None) -> dict:
    """Insert ``count`` synthetic translations and report statistics.

    Args:
        session: SQLAlchemy session to write with
        count: Number of rows; zero or less inserts nothing
        locales: Locales assigned round-robin by index
        tags: Tags assigned round-robin by index
        batch_size: Rows per insert statement
        progress: Optional callable(batch_number, total_batches) called after each batch

    Returns:
        Statistics dict (see ``collect_statistics``) plus ``elapsed_seconds``
    """
    if not locales or not tags:
        raise ValueError('locales and tags must not be empty')
    if batch_size < 1:
        raise ValueError('batch_size must be at least 1')

    started = time.perf_counter()
    total_batches = -(-count // batch_size) if count > 0 else 0

    for batch_number in range(total_batches):
        start = batch_number * batch_size
        size = min(batch_size, count - start)
        rows = build_batch(start, size, locales, tags, datetime.utcnow())

        try:
            session.execute(insert(Translation), rows)
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"Bulk insert failed at batch {batch_number + 1}/{total_batches}: {e}")
            raise

        logger.debug(f"Inserted batch {batch_number + 1}/{total_batches} ({size} rows)")
        if progress:
            progress(batch_number + 1, total_batches)

    elapsed = round(time.perf_counter() - started, 2)

    stats = collect_statistics(session, locales, tags)
    stats['elapsed_seconds'] = elapsed
    return stats


def collect_statistics(session, locales: list, tags: list) -> dict:
    """Per-locale and per-tag counts for the given values plus totals."""
    locale_counts = dict(
        session.query(Translation.locale, func.count(Translation.id))
        .filter(Translation.locale.in_(locales))
        .group_by(Translation.locale)
        .all()
    )
    tag_counts = dict(
        session.query(Translation.tag, func.count(Translation.id))
        .filter(Translation.tag.in_(tags))
        .group_by(Translation.tag)
        .all()
    )

    return {
        'total_count': session.query(func.count(Translation.id)).scalar(),
        'per_locale_counts': {locale: locale_counts.get(locale, 0) for locale in locales},
        'per_tag_counts': {tag: tag_counts.get(tag, 0) for tag in tags},
        'unique_key_count': session.query(func.count(func.distinct(Translation.key))).scalar(),
        'storage': database_size(session),
    }


def database_size(session):
    """Pretty-printed table and database size, or None when not on PostgreSQL."""
    if session.get_bind().dialect.name != 'postgresql':
        return None

    row = session.execute(text(
        "SELECT pg_size_pretty(pg_total_relation_size('translations')) AS table_size, "
        "pg_size_pretty(pg_database_size(current_database())) AS database_size"
    )).first()
    if row is None:
        return None
    return {'table_size': row.table_size, 'database_size': row.database_size}
