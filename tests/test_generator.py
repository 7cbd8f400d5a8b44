"""Tests for bulk translation generation."""

import pytest
from sqlalchemy.exc import IntegrityError

from app.models import Translation
from app.services.generator import build_batch, generate_translations
from scripts.generate_translations import main, parse_args


class TestBuildBatch:
    """Tests for row construction."""

    def test_values_are_assigned_round_robin_by_index(self):
        rows = build_batch(3, 3, ['en', 'fr'], ['mobile', 'desktop', 'web'], now=None)

        assert [row['key'] for row in rows] == ['key_3', 'key_4', 'key_5']
        assert [row['locale'] for row in rows] == ['fr', 'en', 'fr']
        assert [row['tag'] for row in rows] == ['mobile', 'desktop', 'web']
        assert rows[0]['value'] == 'Translation 3'


class TestGenerateTranslations:
    """Tests for generate_translations."""

    def test_even_distribution(self, db_session):
        stats = generate_translations(db_session, 100, ['en', 'fr'], ['mobile', 'web'])

        assert stats['total_count'] == 100
        assert stats['per_locale_counts'] == {'en': 50, 'fr': 50}
        assert stats['per_tag_counts'] == {'mobile': 50, 'web': 50}
        assert stats['unique_key_count'] == 100
        assert stats['elapsed_seconds'] >= 0
        assert stats['storage'] is None  # SQLite

    def test_batches_are_bounded(self, db_session):
        calls = []

        generate_translations(
            db_session, 25, ['en'], ['web'], batch_size=10,
            progress=lambda batch, total: calls.append((batch, total))
        )

        assert calls == [(1, 3), (2, 3), (3, 3)]
        assert Translation.query.count() == 25
        assert Translation.query.filter_by(key='key_24', locale='en').one().value == 'Translation 24'

    @pytest.mark.parametrize('count', [0, -5])
    def test_non_positive_count_is_a_noop(self, db_session, count):
        stats = generate_translations(db_session, count, ['en'], ['web'])

        assert stats['total_count'] == 0
        assert stats['per_locale_counts'] == {'en': 0}
        assert stats['unique_key_count'] == 0

    def test_collision_with_existing_rows_raises(self, db_session, translation_factory):
        translation_factory(key='key_0', locale='en')

        with pytest.raises(IntegrityError):
            generate_translations(db_session, 5, ['en'], ['web'])

        assert Translation.query.count() == 1

    def test_requires_locales_and_tags(self, db_session):
        with pytest.raises(ValueError):
            generate_translations(db_session, 10, [], ['web'])
        with pytest.raises(ValueError):
            generate_translations(db_session, 10, ['en'], [])

    def test_bypasses_cache(self, db_session, service):
        service.export_translations()

        generate_translations(db_session, 3, ['en'], ['web'])

        assert service.export_translations() == {}


class TestGenerateScript:
    """Tests for the command line entry point."""

    def test_defaults(self):
        args = parse_args([])

        assert args.count == 100000
        assert args.locales == ['en', 'fr', 'es', 'de', 'it']
        assert args.tags == ['mobile', 'desktop', 'web']
        assert args.batch_size == 1000

    def test_comma_separated_lists(self):
        args = parse_args(['--count', '10', '--locales', 'en, fr', '--tags', 'web'])

        assert args.count == 10
        assert args.locales == ['en', 'fr']
        assert args.tags == ['web']

    def test_empty_locales_are_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(['--locales', ','])

    def test_main_prints_statistics(self, capsys, monkeypatch):
        monkeypatch.setenv('FLASK_ENV', 'testing')

        exit_code = main(['--count', '6', '--locales', 'en,fr', '--tags', 'web,mobile,desktop'])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert 'Generated 6 translations' in out
        assert "Locale 'en': 3" in out
        assert "Tag 'web': 2" in out
        assert 'Unique keys: 6' in out
        assert 'not available for this database type' in out
