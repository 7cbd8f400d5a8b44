"""Routes package for the translation service."""


def register_routes(app):
    """Register all route blueprints with the application."""
    from .auth import auth_bp
    from .translations import translations_bp

    app.register_blueprint(auth_bp, url_prefix='/api')
    app.register_blueprint(translations_bp, url_prefix='/api')
