# backend/accounts.py
import logging

from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from .store import StoreClient
from .transforms import ACCOUNT_FIELDS, to_columns, transform_account
from .validation import get_payload, parse_balance, require_fields

logger = logging.getLogger("ledger-backend")

bp = Blueprint("accounts", __name__)


@bp.route("", methods=["GET"])
@jwt_required()
def list_accounts():
    client = StoreClient.for_current_user()
    return jsonify([transform_account(r) for r in client.list_accounts()])


@bp.route("", methods=["POST"])
@jwt_required()
def create_account():
    data = get_payload()
    require_fields(data, "name", message="请输入账户名称 / Account name required")

    columns = to_columns(data, ACCOUNT_FIELDS)
    columns["name_en"] = data.get("nameEn") or data["name"]
    columns["balance"] = parse_balance(data.get("balance"))

    client = StoreClient.for_current_user()
    row = client.insert_account(columns)
    logger.info(f"💳 Account created - User: {client.user_id}, Account: {row['id']}")
    return jsonify(transform_account(row))


@bp.route("/<account_id>", methods=["PUT"])
@jwt_required()
def update_account(account_id):
    data = get_payload()
    columns = to_columns(data, ACCOUNT_FIELDS)
    if "balance" in columns:
        columns["balance"] = parse_balance(columns["balance"])

    client = StoreClient.for_current_user()
    row = client.update_account(account_id, columns)
    return jsonify(transform_account(row))


@bp.route("/<account_id>", methods=["DELETE"])
@jwt_required()
def delete_account(account_id):
    client = StoreClient.for_current_user()
    client.delete_account(account_id)
    logger.info(f"🗑️ Account {account_id} deleted for user {client.user_id}")
    return jsonify({"message": "Deleted"})
