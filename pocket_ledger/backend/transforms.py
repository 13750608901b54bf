# backend/transforms.py
# Column translation between store rows (snake_case) and API payloads (camelCase).

ACCOUNT_FIELDS = {
    "name": "name",
    "nameEn": "name_en",
    "type": "type",
    "balance": "balance",
    "icon": "icon",
    "color": "color",
    "description": "description",
    "status": "status",
}

TRANSACTION_FIELDS = {
    "type": "type",
    "amount": "amount",
    "category": "category",
    "categoryIcon": "category_icon",
    "categoryColor": "category_color",
    "date": "date",
    "account": "account",
    "accountId": "account_id",
    "note": "note",
}

PROFILE_FIELDS = {
    "name": "name",
    "avatar": "avatar",
    "membership": "membership",
    "language": "language",
}


def row_to_dict(row):
    """Convert sqlite3.Row to dict"""
    if row is None:
        return None
    return {col: row[col] for col in row.keys()}


def to_columns(payload, fields):
    """Pick the known payload keys that are present and rename them to columns."""
    return {column: payload[key] for key, column in fields.items() if key in payload}


def _as_float(value):
    return float(value) if value is not None else 0.0


def transform_account(row):
    row = row_to_dict(row)
    return {
        "id": row["id"],
        "name": row["name"],
        "nameEn": row["name_en"],
        "type": row["type"],
        "balance": _as_float(row["balance"]),
        "icon": row["icon"],
        "color": row["color"],
        "description": row["description"],
        "status": row["status"],
    }


def transform_transaction(row):
    row = row_to_dict(row)
    return {
        "id": row["id"],
        "type": row["type"],
        "amount": _as_float(row["amount"]),
        "category": row["category"],
        "categoryIcon": row["category_icon"],
        "categoryColor": row["category_color"],
        "date": row["date"],
        # the client filters on `time`
        "time": row["date"],
        "account": row["account"],
        "accountId": row["account_id"],
        "note": row["note"],
    }


def transform_profile(row):
    row = row_to_dict(row)
    return {
        "id": row["id"],
        "name": row["name"],
        "avatar": row["avatar"],
        "membership": row["membership"],
        "language": row["language"],
    }
