from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import logging
import os
from dotenv import load_dotenv

load_dotenv()

db = SQLAlchemy()
limiter = Limiter(key_func=get_remote_address)

logger = logging.getLogger(__name__)


def _database_url():
    url = os.getenv('DATABASE_URL', 'sqlite:///translations.db')
    # Heroku/Render style URLs are not accepted by SQLAlchemy 1.4+
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


def create_app(config_name='development', config_overrides=None):
    app = Flask(__name__)

    logging.basicConfig(
        level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    # Config
    app.config['SQLALCHEMY_DATABASE_URI'] = _database_url()
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['JWT_SECRET_KEY'] = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    app.config['JWT_ACCESS_TOKEN_EXPIRES'] = int(os.getenv('JWT_ACCESS_TOKEN_EXPIRES', 86400))
    app.config['REDIS_URL'] = os.getenv('REDIS_URL')
    app.config['RATELIMIT_DEFAULT'] = os.getenv('RATELIMIT_DEFAULT', '60 per minute')
    app.config['RATELIMIT_STORAGE_URI'] = os.getenv('REDIS_URL') or 'memory://'
    app.config['SLOW_RESPONSE_THRESHOLD_MS'] = float(os.getenv('SLOW_RESPONSE_THRESHOLD_MS', 200))

    if config_name == 'testing':
        app.config['TESTING'] = True
        app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite:///:memory:'
        app.config['REDIS_URL'] = None
        app.config['RATELIMIT_ENABLED'] = False
        app.config['RATELIMIT_STORAGE_URI'] = 'memory://'

    if config_overrides:
        app.config.update(config_overrides)

    # Initialize extensions
    db.init_app(app)
    limiter.init_app(app)
    CORS(app)

    # Cache layer and translation service are shared by every request
    from app.services.cache import create_cache
    from app.services.translation import TranslationService

    cache = create_cache(app.config['REDIS_URL'])
    app.extensions['translation_cache'] = cache
    app.extensions['translation_service'] = TranslationService(db.session, cache)

    # Create tables with error handling
    with app.app_context():
        from app import models  # noqa: F401 - registers tables on db.metadata
        try:
            db.create_all()
        except Exception as e:
            logger.warning(f"Could not create database tables: {e}")

    from app.utils.timing import register_response_timing
    register_response_timing(app)

    # Register routes
    from app.routes import register_routes
    register_routes(app)

    @app.errorhandler(429)
    def rate_limited(e):
        return jsonify({'message': 'Too many requests'}), 429

    # Flask logs the traceback before this handler runs
    @app.errorhandler(500)
    def internal_error(e):
        return jsonify({'message': 'Internal server error'}), 500

    # Health check
    @app.route('/health', methods=['GET'])
    def health():
        return {'status': 'ok'}, 200

    return app
