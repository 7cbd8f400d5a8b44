"""Database models for the translation management service."""

from .user import User
from .translation import Translation

__all__ = ['User', 'Translation']
