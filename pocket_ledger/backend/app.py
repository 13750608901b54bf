# backend/app.py
import logging
import os
from datetime import timedelta

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException

from pocket_ledger.constants import CATEGORIES

from . import db
from .accounts import bp as accounts_bp
from .auth import auth_bp, register_jwt_callbacks
from .profile import profile_bp
from .store import AuthError, StoreError
from .transactions import bp as transactions_bp
from .validation import ValidationError

# ---------------- Configuration ----------------
# .env.local wins over .env
load_dotenv(".env.local")
load_dotenv(".env")

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("ledger-backend")

DEFAULT_PORT = 7879


def _default_config():
    return {
        "JWT_SECRET_KEY": os.environ.get("JWT_SECRET_KEY", "dev-key-change-me-in-production"),
        "JWT_ACCESS_TOKEN_EXPIRES": timedelta(
            minutes=int(os.environ.get("JWT_ACCESS_TOKEN_MINUTES", 60))
        ),
        "JWT_REFRESH_TOKEN_EXPIRES": timedelta(
            days=int(os.environ.get("JWT_REFRESH_TOKEN_DAYS", 30))
        ),
        "DB_PATH": os.environ.get("DB_PATH", db.DEFAULT_DB_PATH),
        "CORS_ORIGINS": os.environ.get(
            "CORS_ORIGINS", "http://localhost:8501,http://localhost:8502"
        ),
    }


# ---------------- Flask App Factory ----------------
def create_app(test_config=None):
    app = Flask(__name__)
    app.config.update(_default_config())
    if test_config:
        app.config.update(test_config)
    app.json.ensure_ascii = False

    jwt = JWTManager(app)
    register_jwt_callbacks(jwt)

    # CORS
    origins = [o.strip() for o in app.config["CORS_ORIGINS"].split(",") if o.strip()]
    CORS(app, resources={r"/api/*": {"origins": origins}}, supports_credentials=True)

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(profile_bp, url_prefix='/api/profile')
    app.register_blueprint(accounts_bp, url_prefix='/api/accounts')
    app.register_blueprint(transactions_bp, url_prefix='/api/transactions')

    # Initialize DB
    with app.app_context():
        db.init_db()
        logger.info(f"Database initialized at {app.config['DB_PATH']}")

    app.teardown_appcontext(db.close_connection)

    # ---------------- Errors ----------------
    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return jsonify({"error": e.message}), 400

    @app.errorhandler(AuthError)
    def handle_auth_error(e):
        return jsonify({"error": str(e)}), 401

    @app.errorhandler(StoreError)
    def handle_store_error(e):
        logger.warning(f"Store error: {e}")
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code
        logger.exception("Unhandled error")
        return jsonify({"error": "服务器错误 / Internal server error"}), 500

    # ---------------- Core Endpoints ----------------
    @app.route('/api/health')
    def health():
        return jsonify({"status": "ok"})

    @app.route('/api/categories')
    def categories():
        return jsonify({"categories": CATEGORIES})

    return app


def main():
    app = create_app()
    port = int(os.environ.get("PORT", DEFAULT_PORT))
    debug_mode = os.environ.get('FLASK_DEBUG', '').lower() in ('1', 'true', 'yes', 'on')
    logger.info(f"🚀 Ledger backend listening on http://localhost:{port} (API base /api)")
    app.run(port=port, debug=debug_mode)


if __name__ == '__main__':
    main()
