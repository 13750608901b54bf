# backend/store.py
"""
Data store for the ledger API.

Two entry points:

* module level auth helpers (``sign_up``, ``sign_in``, token revocation)
  that act before a user is known;
* ``StoreClient``, built fresh for every request from the caller's verified
  token. Every statement it runs is filtered by that caller's user id, so a
  handler cannot reach another user's rows even with a foreign row id.
"""
import logging
import sqlite3
import uuid

from flask_jwt_extended import get_jwt_identity
from werkzeug.security import check_password_hash, generate_password_hash

from pocket_ledger.constants import ACCOUNT_DEFAULTS, DEFAULT_LANGUAGE, DEFAULT_MEMBERSHIP

from . import db

logger = logging.getLogger("ledger-backend")

NO_ROWS = "JSON object requested, multiple (or no) rows returned"


class StoreError(Exception):
    """Any failure reported by the store. Rendered as a 400."""


class AuthError(StoreError):
    """Bad credentials. Rendered as a 401."""


def _new_id():
    return str(uuid.uuid4())


def _run(query, args=()):
    try:
        return db.execute_db(query, args)
    except sqlite3.IntegrityError as e:
        raise StoreError(str(e)) from e
    except sqlite3.Error as e:
        logger.exception("Store write failed")
        raise StoreError(str(e)) from e


def _fetch(query, args=(), one=False):
    try:
        return db.query_db(query, args, one=one)
    except sqlite3.Error as e:
        logger.exception("Store read failed")
        raise StoreError(str(e)) from e


# ---------------- Auth ----------------
def sign_up(email, password, name=None):
    """Create a user and its profile row. Returns the user dict."""
    email = str(email).strip().lower()
    existing = _fetch("SELECT id FROM users WHERE email=?", (email,), one=True)
    if existing:
        raise StoreError("User already registered")
    if len(password) < 6:
        raise StoreError("Password should be at least 6 characters")

    user_id = _new_id()
    display_name = name or email.split('@')[0]
    _run(
        "INSERT INTO users (id, email, password_hash) VALUES (?,?,?)",
        (user_id, email, generate_password_hash(password)),
    )
    _run(
        "INSERT INTO profiles (id, name, avatar, membership, language) VALUES (?,?,?,?,?)",
        (user_id, display_name, "", DEFAULT_MEMBERSHIP, DEFAULT_LANGUAGE),
    )
    logger.info(f"👤 New user registered: {user_id}")
    return {"id": user_id, "email": email, "name": display_name}


def sign_in(email, password):
    row = _fetch(
        "SELECT u.id, u.email, u.password_hash, p.name FROM users u "
        "LEFT JOIN profiles p ON p.id = u.id WHERE u.email=?",
        (str(email or "").strip().lower(),),
        one=True,
    )
    if not row or not check_password_hash(row["password_hash"], password):
        raise AuthError("Invalid login credentials")
    return {"id": row["id"], "email": row["email"], "name": row["name"] or ""}


def get_user(user_id):
    row = _fetch("SELECT id, email FROM users WHERE id=?", (user_id,), one=True)
    return {"id": row["id"], "email": row["email"]} if row else None


def revoke_token(jti):
    _run("INSERT OR IGNORE INTO revoked_tokens (jti) VALUES (?)", (jti,))


def is_token_revoked(jti):
    return _fetch("SELECT 1 FROM revoked_tokens WHERE jti=?", (jti,), one=True) is not None


# ---------------- Scoped client ----------------
class StoreClient:
    """Row access on behalf of one authenticated user."""

    def __init__(self, user_id):
        if not user_id:
            raise StoreError("Store client requires an authenticated user")
        self.user_id = user_id

    @classmethod
    def for_current_user(cls):
        return cls(get_jwt_identity())

    def _update(self, table, columns, where, args):
        if not columns:
            return
        assignments = ", ".join(f"{col}=?" for col in columns)
        touched = _run(
            f"UPDATE {table} SET {assignments} WHERE {where}",
            list(columns.values()) + list(args),
        )
        if not touched:
            raise StoreError(NO_ROWS)

    # -- profile --
    def get_profile(self):
        row = _fetch("SELECT * FROM profiles WHERE id=?", (self.user_id,), one=True)
        if not row:
            raise StoreError(NO_ROWS)
        return row

    def update_profile(self, columns):
        self._update("profiles", columns, "id=?", (self.user_id,))
        return self.get_profile()

    # -- accounts --
    def list_accounts(self):
        return _fetch(
            "SELECT * FROM accounts WHERE user_id=? ORDER BY created_at ASC, rowid ASC",
            (self.user_id,),
        )

    def get_account(self, account_id):
        row = _fetch(
            "SELECT * FROM accounts WHERE id=? AND user_id=?",
            (account_id, self.user_id),
            one=True,
        )
        if not row:
            raise StoreError(NO_ROWS)
        return row

    def insert_account(self, columns):
        values = dict(ACCOUNT_DEFAULTS)
        values.update({k: v for k, v in columns.items() if v not in (None, "")})
        values["id"] = _new_id()
        values["user_id"] = self.user_id
        values.setdefault("name_en", values.get("name", ""))
        names = ", ".join(values)
        marks = ", ".join("?" for _ in values)
        _run(f"INSERT INTO accounts ({names}) VALUES ({marks})", list(values.values()))
        return self.get_account(values["id"])

    def update_account(self, account_id, columns):
        self._update("accounts", columns, "id=? AND user_id=?", (account_id, self.user_id))
        return self.get_account(account_id)

    def delete_account(self, account_id):
        touched = _run(
            "DELETE FROM accounts WHERE id=? AND user_id=?", (account_id, self.user_id)
        )
        if not touched:
            raise StoreError(NO_ROWS)

    # -- transactions --
    def list_transactions(self):
        return _fetch(
            "SELECT * FROM transactions WHERE user_id=? ORDER BY created_at DESC, rowid DESC",
            (self.user_id,),
        )

    def get_transaction(self, tx_id):
        row = _fetch(
            "SELECT * FROM transactions WHERE id=? AND user_id=?",
            (tx_id, self.user_id),
            one=True,
        )
        if not row:
            raise StoreError(NO_ROWS)
        return row

    def insert_transaction(self, columns):
        values = dict(columns)
        values["id"] = _new_id()
        values["user_id"] = self.user_id
        names = ", ".join(values)
        marks = ", ".join("?" for _ in values)
        _run(f"INSERT INTO transactions ({names}) VALUES ({marks})", list(values.values()))
        return self.get_transaction(values["id"])

    def update_transaction(self, tx_id, columns):
        self._update("transactions", columns, "id=? AND user_id=?", (tx_id, self.user_id))
        return self.get_transaction(tx_id)

    def delete_transaction(self, tx_id):
        touched = _run(
            "DELETE FROM transactions WHERE id=? AND user_id=?", (tx_id, self.user_id)
        )
        if not touched:
            raise StoreError(NO_ROWS)
