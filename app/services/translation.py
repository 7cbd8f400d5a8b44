"""Translation service: cached reads and uniqueness-checked writes.

Reads are cache-aside. Every cache key issued for a filtered list or a point
lookup is recorded in a registry set so that a write can invalidate all of
them without pattern deletes. Any successful create or update clears the
export entry and every registered key.
"""
import hashlib
import json
import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError

from app.models import Translation
from app.utils.validation import is_blank

logger = logging.getLogger(__name__)

# Cache key layout
FILTERED_PREFIX = 'translations_filtered_'
RECORD_PREFIX = 'translation_'
EXPORT_CACHE_KEY = 'translations_export'
REGISTRY_KEY = 'translation_cache_keys'

FILTER_FIELDS = ('locale', 'tag', 'key', 'value')
UPDATABLE_FIELDS = ('key', 'locale', 'value', 'tag')


class TranslationError(Exception):
    """Base class for translation service failures."""


class DuplicateKeyError(TranslationError):
    """A translation with the same key already exists for the locale."""

    def __init__(self, key, locale):
        super().__init__('Key already exists for this locale.')
        self.key = key
        self.locale = locale


class NotFoundError(TranslationError):
    """No translation with the given id."""

    def __init__(self, translation_id):
        super().__init__('Translation not found')
        self.translation_id = translation_id


def normalize_filters(filters) -> dict:
    """Keep known, non-blank filters so equivalent queries share a cache key.

    Whitespace-only values count as absent, matching ``validate_filters``.
    """
    filters = filters or {}
    return {
        name: filters[name]
        for name in FILTER_FIELDS
        if not is_blank(filters.get(name))
    }


def filters_fingerprint(filters: dict) -> str:
    """Stable cache key for a normalized filter set."""
    payload = json.dumps(filters, sort_keys=True, separators=(',', ':'))
    return FILTERED_PREFIX + hashlib.md5(payload.encode('utf-8')).hexdigest()


class TranslationService:
    """Orchestrates translation reads and writes over a session and a cache."""

    CACHE_TTL = 300         # 5 minutes
    EXPORT_CACHE_TTL = 600  # 10 minutes
    REGISTRY_TTL = 600      # outlives every tracked entry
    RESULT_LIMIT = 1000
    EXPORT_CHUNK_SIZE = 1000

    def __init__(self, session, cache):
        self.session = session
        self.cache = cache

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_translations_by_params(self, filters) -> dict:
        """List translations matching all given filters, capped at RESULT_LIMIT.

        ``locale`` and ``tag`` match exactly, ``key`` and ``value`` match as
        substrings. ``count`` is the number of records returned.
        """
        filters = normalize_filters(filters)
        cache_key = filters_fingerprint(filters)
        self.cache.track(REGISTRY_KEY, cache_key, self.REGISTRY_TTL)

        def load():
            query = self.session.query(Translation)

            if filters.get('locale'):
                query = query.filter(Translation.locale == filters['locale'])

            if filters.get('tag'):
                query = query.filter(Translation.tag == filters['tag'])

            if filters.get('key'):
                query = query.filter(Translation.key.contains(filters['key'], autoescape=True))

            if filters.get('value'):
                query = query.filter(Translation.value.contains(filters['value'], autoescape=True))

            translations = query.order_by(Translation.id).limit(self.RESULT_LIMIT).all()

            return {
                'count': len(translations),
                'data': [translation.to_dict() for translation in translations],
            }

        return self.cache.get_or_compute(cache_key, self.CACHE_TTL, load)

    def get_translation_by_id(self, translation_id: int) -> dict | None:
        """Return the translation as a dict, or None when it does not exist."""
        cache_key = f'{RECORD_PREFIX}{translation_id}'
        self.cache.track(REGISTRY_KEY, cache_key, self.REGISTRY_TTL)

        def load():
            translation = self.session.get(Translation, translation_id)
            return translation.to_dict() if translation else None

        return self.cache.get_or_compute(cache_key, self.CACHE_TTL, load)

    def export_translations(self) -> dict:
        """Return every translation grouped as {locale: {key: value}}.

        Rows are read in id order, EXPORT_CHUNK_SIZE at a time.
        """
        def load():
            data = {}
            last_id = 0

            while True:
                rows = (
                    self.session.query(Translation.id, Translation.locale, Translation.key, Translation.value)
                    .filter(Translation.id > last_id)
                    .order_by(Translation.id)
                    .limit(self.EXPORT_CHUNK_SIZE)
                    .all()
                )
                if not rows:
                    break

                for row in rows:
                    data.setdefault(row.locale, {})[row.key] = row.value

                last_id = rows[-1].id
                if len(rows) < self.EXPORT_CHUNK_SIZE:
                    break

            return data

        return self.cache.get_or_compute(EXPORT_CACHE_KEY, self.EXPORT_CACHE_TTL, load)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _exists(self, key, locale) -> bool:
        return self.session.query(Translation.id).filter_by(key=key, locale=locale).first() is not None

    def store_translation(self, data: dict) -> dict:
        """Create a translation.

        Raises DuplicateKeyError when (key, locale) is already taken, either
        by the existence check or by the unique constraint when a concurrent
        insert wins the race.
        """
        key, locale = data['key'], data['locale']

        try:
            if self._exists(key, locale):
                logger.info(f"Rejected duplicate translation {locale}:{key}")
                raise DuplicateKeyError(key, locale)

            translation = Translation(
                key=key,
                locale=locale,
                value=data['value'],
                tag=data.get('tag')
            )
            self.session.add(translation)
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            logger.warning(f"Concurrent insert of {locale}:{key} rejected by unique constraint")
            raise DuplicateKeyError(key, locale) from None
        except Exception:
            self.session.rollback()
            raise

        self.clear_translation_caches()
        return translation.to_dict()

    def update_translation(self, translation_id: int, data: dict) -> dict:
        """Apply the fields present in ``data`` to an existing translation.

        Raises NotFoundError for an unknown id and DuplicateKeyError when the
        new (key, locale) collides with another translation.
        """
        try:
            translation = self.session.get(Translation, translation_id)
            if translation is None:
                raise NotFoundError(translation_id)

            for field in UPDATABLE_FIELDS:
                if field in data:
                    setattr(translation, field, data[field])
            translation.updated_at = datetime.utcnow()

            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            logger.info(f"Update of translation {translation_id} collides with an existing key/locale")
            raise DuplicateKeyError(data.get('key'), data.get('locale')) from None
        except Exception:
            self.session.rollback()
            raise

        self.clear_translation_caches()
        return translation.to_dict()

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    def clear_translation_caches(self) -> None:
        """Forget the export and every registered list/point-lookup entry."""
        self.cache.forget(EXPORT_CACHE_KEY)

        keys = self.cache.drain(REGISTRY_KEY)
        for key in keys:
            if key.startswith(FILTERED_PREFIX) or key.startswith(RECORD_PREFIX):
                self.cache.forget(key)

        logger.debug(f"Cleared translation export cache and {len(keys)} tracked entries")
