"""Shared utilities for the translation service.

This package contains reusable helpers shared across route modules.
"""

from app.utils.auth import (
    token_required,
    issue_token,
    revoke_token,
)
from app.utils.validation import (
    validate_translation,
    clean_translation,
    validate_filters,
    validate_login,
)

__all__ = [
    'token_required',
    'issue_token',
    'revoke_token',
    'validate_translation',
    'clean_translation',
    'validate_filters',
    'validate_login',
]
