"""Request payload validation for translation and auth routes.

Validators return a dict of ``{field: [messages]}``; an empty dict means the
payload is valid. Empty strings are treated the same as missing values.
"""

import re

EMAIL_REGEX = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')

# Max lengths mirror the column sizes on Translation
FIELD_LIMITS = {
    'key': 255,
    'locale': 5,
    'value': None,
    'tag': 50,
}


def is_blank(value):
    return value is None or (isinstance(value, str) and value.strip() == '')


def _check_string(errors, field, value):
    if not isinstance(value, str):
        errors.setdefault(field, []).append(f'The {field} field must be a string.')
        return
    limit = FIELD_LIMITS.get(field)
    if limit is not None and len(value) > limit:
        errors.setdefault(field, []).append(
            f'The {field} field must not be greater than {limit} characters.'
        )


def validate_translation(data, partial=False):
    """Validate a create (``partial=False``) or update (``partial=True``) payload."""
    errors = {}
    if not isinstance(data, dict):
        return {'body': ['The request body must be a JSON object.']}

    for field in ('key', 'locale', 'value'):
        if field not in data and partial:
            continue
        if is_blank(data.get(field)):
            errors.setdefault(field, []).append(f'The {field} field is required.')
            continue
        _check_string(errors, field, data[field])

    # Tag is nullable on both create and update
    if not is_blank(data.get('tag')):
        _check_string(errors, 'tag', data['tag'])

    return errors


def clean_translation(data, partial=False):
    """Pick the translation fields from a validated payload."""
    cleaned = {}
    for field in ('key', 'locale', 'value'):
        if field in data:
            cleaned[field] = data[field]
    if 'tag' in data or not partial:
        cleaned['tag'] = None if is_blank(data.get('tag')) else data['tag']
    return cleaned


def validate_filters(args):
    """Validate list filters from the query string."""
    errors = {}
    for field in ('locale', 'tag', 'key'):
        value = args.get(field)
        if not is_blank(value):
            _check_string(errors, field, value)
    return errors


def validate_login(data):
    errors = {}
    if not isinstance(data, dict):
        return {'body': ['The request body must be a JSON object.']}

    email = data.get('email')
    if is_blank(email):
        errors['email'] = ['The email field is required.']
    elif not isinstance(email, str) or not EMAIL_REGEX.match(email):
        errors['email'] = ['The email field must be a valid email address.']

    if is_blank(data.get('password')):
        errors['password'] = ['The password field is required.']

    return errors
