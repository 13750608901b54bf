# backend/auth.py
import logging

from flask import Blueprint, jsonify
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    get_jwt,
    get_jwt_identity,
    jwt_required,
    current_user,
)

from . import store
from .validation import (
    EMAIL_PASSWORD_REQUIRED,
    INVALID_TOKEN,
    NOT_AUTHENTICATED,
    get_payload,
    require_fields,
)

logger = logging.getLogger("ledger-backend")

auth_bp = Blueprint("auth", __name__)


def issue_session(user_id):
    return {
        "access_token": create_access_token(identity=user_id),
        "refresh_token": create_refresh_token(identity=user_id),
    }


def register_jwt_callbacks(jwt):
    """Wire JWTManager failures to the API's 401 error bodies."""

    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({"error": NOT_AUTHENTICATED}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        logger.warning(f"Rejected token: {reason}")
        return jsonify({"error": INVALID_TOKEN}), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({"error": INVALID_TOKEN}), 401

    @jwt.revoked_token_loader
    def revoked_token(jwt_header, jwt_payload):
        return jsonify({"error": INVALID_TOKEN}), 401

    @jwt.token_in_blocklist_loader
    def token_revoked(jwt_header, jwt_payload):
        return store.is_token_revoked(jwt_payload["jti"])

    @jwt.user_lookup_loader
    def lookup_user(jwt_header, jwt_payload):
        return store.get_user(jwt_payload["sub"])

    @jwt.user_lookup_error_loader
    def unknown_user(jwt_header, jwt_payload):
        return jsonify({"error": INVALID_TOKEN}), 401


@auth_bp.route('/register', methods=['POST'])
def register():
    data = get_payload()
    require_fields(data, 'email', 'password', message=EMAIL_PASSWORD_REQUIRED)

    user = store.sign_up(data['email'], str(data['password']), data.get('name'))
    return jsonify({"user": user, "session": issue_session(user["id"])})


@auth_bp.route('/login', methods=['POST'])
def login():
    data = get_payload()
    require_fields(data, 'email', 'password', message=EMAIL_PASSWORD_REQUIRED)

    user = store.sign_in(data['email'], str(data['password']))
    logger.info(f"🔑 Login: {user['id']}")
    return jsonify({"user": user, "session": issue_session(user["id"])})


@auth_bp.route('/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh():
    user_id = get_jwt_identity()
    # the used refresh token is single-use
    store.revoke_token(get_jwt()["jti"])
    return jsonify({"session": issue_session(user_id)})


@auth_bp.route('/logout', methods=['POST'])
@jwt_required()
def logout():
    store.revoke_token(get_jwt()["jti"])
    logger.info(f"🚪 Logout: {get_jwt_identity()}")
    return jsonify({"message": "已登出 / Logged out"})


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def me():
    return jsonify({"user": current_user})
