# backend/transactions.py
import logging

from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from .store import StoreClient
from .transforms import TRANSACTION_FIELDS, to_columns, transform_transaction
from .validation import (
    ValidationError,
    check_transaction_type,
    get_payload,
    parse_amount,
    parse_date,
    require_fields,
)

logger = logging.getLogger("ledger-backend")

bp = Blueprint("transactions", __name__)


def _normalize(data, columns, partial=False):
    """Validate the fields that carry meaning beyond free text.

    With ``partial`` a present but empty date is an error, not today.
    """
    if "type" in columns:
        check_transaction_type(columns["type"])
    if "amount" in columns:
        columns["amount"] = parse_amount(columns["amount"])
    # older clients send the date as `time`
    if "date" not in data and data.get("time"):
        columns["date"] = data["time"]
    if "date" in columns:
        if partial and not columns["date"]:
            raise ValidationError("日期不能为空 / Date must not be empty")
        columns["date"] = parse_date(columns["date"])
    if "account_id" in columns and not columns["account_id"]:
        columns["account_id"] = None
    return columns


@bp.route("", methods=["GET"])
@jwt_required()
def list_transactions():
    client = StoreClient.for_current_user()
    return jsonify([transform_transaction(r) for r in client.list_transactions()])


@bp.route("", methods=["POST"])
@jwt_required()
def add_transaction():
    data = get_payload()
    require_fields(
        data, "type", "amount", "category",
        message="请填写类型、金额和分类 / Type, amount and category required",
    )

    columns = {
        "category_icon": "",
        "category_color": "",
        "account": "",
        "note": "",
    }
    columns.update({k: v for k, v in to_columns(data, TRANSACTION_FIELDS).items() if v is not None})
    columns = _normalize(data, columns)
    columns.setdefault("date", parse_date(None))

    client = StoreClient.for_current_user()
    row = client.insert_transaction(columns)
    logger.info(f"🧾 Transaction created - User: {client.user_id}, Tx: {row['id']}")
    return jsonify(transform_transaction(row))


@bp.route("/<tx_id>", methods=["PUT"])
@jwt_required()
def update_transaction(tx_id):
    data = get_payload()
    columns = _normalize(data, to_columns(data, TRANSACTION_FIELDS), partial=True)

    client = StoreClient.for_current_user()
    row = client.update_transaction(tx_id, columns)
    return jsonify(transform_transaction(row))


@bp.route("/<tx_id>", methods=["DELETE"])
@jwt_required()
def delete_transaction(tx_id):
    client = StoreClient.for_current_user()
    client.delete_transaction(tx_id)
    logger.info(f"🗑️ Transaction {tx_id} deleted for user {client.user_id}")
    return jsonify({"message": "Deleted"})
