"""Translation model: one text value per (key, locale) pair."""

from datetime import datetime
from app import db


class Translation(db.Model):
    """A translated string identified by its key and locale, optionally grouped by tag."""

    __tablename__ = 'translations'

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(255), nullable=False, index=True)
    locale = db.Column(db.String(5), nullable=False, index=True)  # e.g. 'en', 'fr', 'pt-BR'
    value = db.Column(db.Text, nullable=False)
    tag = db.Column(db.String(50), nullable=True, index=True)  # 'mobile', 'desktop', 'web'
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('key', 'locale', name='translations_key_locale_unique'),
        db.Index('ix_translations_locale_tag', 'locale', 'tag'),
        db.Index('ix_translations_key_locale_tag', 'key', 'locale', 'tag'),
        db.Index('ix_translations_timestamps', 'created_at', 'updated_at'),
    )

    def to_dict(self):
        """Convert translation to a JSON-serializable dictionary."""
        return {
            'id': self.id,
            'key': self.key,
            'locale': self.locale,
            'value': self.value,
            'tag': self.tag,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self):
        return f'<Translation {self.locale}:{self.key}>'
