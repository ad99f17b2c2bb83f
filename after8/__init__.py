# after8/__init__.py

import logging
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_cors import CORS
from .config import Config

db = SQLAlchemy()
migrate = Migrate()

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Configure logging to show INFO level messages
    app.logger.setLevel(logging.INFO)
    if not app.logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)
        formatter = logging.Formatter('[%(asctime)s] %(levelname)s: %(message)s')
        handler.setFormatter(formatter)
        app.logger.addHandler(handler)

    db.init_app(app)
    migrate.init_app(app, db)

    # Only the two frontend deployments may call the API from a browser.
    origins = [o for o in (app.config.get('FRONTEND_URL'), app.config.get('FRONTEND_LOCAL_URL')) if o]
    CORS(app, origins=origins,
         methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS'],
         allow_headers=['Content-Type', 'Authorization'])

    # --- BLUEPRINTS ---
    from .api.auth import bp as auth_bp
    from .api.users import bp as users_bp
    from .api.events import bp as events_bp
    from .api.matches import bp as matches_bp
    from .api.game import bp as game_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(events_bp, url_prefix='/api/events')
    app.register_blueprint(matches_bp, url_prefix='/api/matches')
    app.register_blueprint(game_bp, url_prefix='/api/game')

    @app.route('/')
    def index():
        return jsonify({"message": "After8 server is up"}), 200

    @app.route('/api/health')
    def health():
        from sqlalchemy import text
        try:
            db.session.execute(text('SELECT 1'))
            return jsonify({"status": "ok", "database": "connected"}), 200
        except Exception as e:
            app.logger.error(f"Health check database error: {str(e)}")
            return jsonify({"status": "error", "database": "disconnected"}), 503

    # --- JSON ERROR HANDLERS ---
    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"success": False, "error": "Resource not found.", "error_code": 404}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"success": False, "error": "Method not allowed.", "error_code": 405}), 405

    @app.errorhandler(500)
    def internal_error(e):
        db.session.rollback()
        return jsonify({"success": False, "error": "Internal server error.", "error_code": 500}), 500

    with app.app_context():
        from . import models  # noqa: F401

    return app
