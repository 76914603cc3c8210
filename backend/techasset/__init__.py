# backend/techasset/__init__.py
from flask import Flask, jsonify, request

from .config import Config, build_engine_options
from .extensions import db, migrate, install_connection_guards


def create_app(config_overrides: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)
    app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", build_engine_options(app.config))

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    with app.app_context():
        install_connection_guards(db.engine, app.config["DB_STATEMENT_TIMEOUT_SECONDS"])

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.users import users_bp
    from .routes.activity import activity_bp
    from .routes.itcheck import itcheck_bp
    from .routes.licenses import licenses_bp
    from .routes.passwords import passwords_bp
    from .routes.tickets import tickets_bp
    from .routes.credits import credits_bp
    from .routes.worklogs import chapmancg_bp, internallog_bp
    from .routes.feedback import feedback_bp
    from .routes.migrate import migrate_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(activity_bp)
    app.register_blueprint(itcheck_bp)
    app.register_blueprint(licenses_bp)
    app.register_blueprint(passwords_bp)
    app.register_blueprint(tickets_bp)
    app.register_blueprint(credits_bp)
    app.register_blueprint(chapmancg_bp)
    app.register_blueprint(internallog_bp)
    app.register_blueprint(feedback_bp)
    app.register_blueprint(migrate_bp)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allowed_origins = set(app.config.get("CORS_ALLOWED_ORIGINS", []))
        if origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
        return response

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(500)
    def internal_error(error):
        return jsonify({"error": "Internal server error"}), 500

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
