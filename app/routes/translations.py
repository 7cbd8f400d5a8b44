"""Translation routes: filtered listing, point lookup, create, update, export.

All routes require a bearer token. Request validation happens here; the
TranslationService only sees validated payloads.
"""

from flask import Blueprint, request, jsonify, current_app
from app.services.translation import DuplicateKeyError, NotFoundError
from app.utils import token_required, validate_translation, clean_translation, validate_filters

translations_bp = Blueprint('translations', __name__)


def get_translation_service():
    return current_app.extensions['translation_service']


def validation_error(errors):
    return jsonify({'message': 'The given data was invalid', 'errors': errors}), 422


@translations_bp.route('/getTranslations', methods=['GET'])
@token_required
def get_translations(current_user_id):
    """List translations filtered by locale, tag, key or value (max 1000).

    Query params:
    - locale: exact locale match (e.g. en, fr)
    - tag: exact tag match (e.g. mobile, web)
    - key: substring of the translation key
    - value: substring of the translation value
    """
    filters = {name: request.args.get(name) for name in ('locale', 'tag', 'key', 'value')}

    errors = validate_filters(filters)
    if errors:
        return validation_error(errors)

    return jsonify(get_translation_service().get_translations_by_params(filters)), 200


@translations_bp.route('/getTranslationById/<int:translation_id>', methods=['GET'])
@token_required
def get_translation_by_id(current_user_id, translation_id):
    """Get a single translation."""
    translation = get_translation_service().get_translation_by_id(translation_id)

    if translation is None:
        return jsonify({'message': 'Translation not found'}), 404

    return jsonify(translation), 200


@translations_bp.route('/createTranslation', methods=['POST'])
@token_required
def create_translation(current_user_id):
    """Create a translation; (key, locale) must be unique."""
    data = request.get_json(silent=True)

    errors = validate_translation(data)
    if errors:
        return validation_error(errors)

    try:
        translation = get_translation_service().store_translation(clean_translation(data))
    except DuplicateKeyError as e:
        return jsonify({'message': str(e)}), 409

    return jsonify({
        'message': 'Translation created successfully',
        'data': translation
    }), 201


@translations_bp.route('/updateTranslation/<int:translation_id>', methods=['PUT'])
@token_required
def update_translation(current_user_id, translation_id):
    """Update only the fields present in the request body."""
    data = request.get_json(silent=True)

    errors = validate_translation(data, partial=True)
    if errors:
        return validation_error(errors)

    try:
        translation = get_translation_service().update_translation(
            translation_id, clean_translation(data, partial=True)
        )
    except NotFoundError as e:
        return jsonify({'message': str(e)}), 404
    except DuplicateKeyError as e:
        return jsonify({'message': str(e)}), 409

    return jsonify({
        'message': 'Translation updated successfully',
        'data': translation
    }), 200


@translations_bp.route('/translationsJsonExport', methods=['GET'])
@token_required
def export_translations(current_user_id):
    """Export all translations as {locale: {key: value}} for frontend bundles."""
    return jsonify(get_translation_service().export_translations()), 200
