# backend/db.py
import os
import sqlite3

from flask import current_app, g

DEFAULT_DB_PATH = os.environ.get(
    "DB_PATH", os.path.join(os.getcwd(), "data", "ledger.db")
)
SCHEMA_FILE = os.path.join(os.path.dirname(__file__), "init_db.sql")


def _connect(path):
    # ensure directory exists
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    conn = sqlite3.connect(path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def get_db():
    db = getattr(g, '_database', None)
    if db is None:
        db = g._database = _connect(current_app.config["DB_PATH"])
    return db


def close_connection(exception=None):
    db = g.pop('_database', None)
    if db is not None:
        db.close()


def query_db(query, args=(), one=False):
    cur = get_db().execute(query, args)
    rv = cur.fetchall()
    cur.close()
    return (rv[0] if rv else None) if one else rv


def execute_db(query, args=()):
    """Run a write statement and commit. Returns the number of rows touched."""
    conn = get_db()
    cur = conn.cursor()
    try:
        cur.execute(query, args)
        conn.commit()
    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        count = cur.rowcount
        cur.close()
    return count


def init_db(path=None):
    """
    Create tables and balance triggers from init_db.sql.
    Idempotent (IF NOT EXISTS everywhere), so it is safe to call at startup.
    """
    if not os.path.exists(SCHEMA_FILE):
        raise FileNotFoundError(f"init_db.sql not found at expected path: {SCHEMA_FILE}")

    conn = _connect(path or current_app.config["DB_PATH"])
    try:
        with open(SCHEMA_FILE, 'r', encoding='utf-8') as f:
            sql = f.read()
        conn.executescript(sql)
        conn.commit()
    finally:
        conn.close()
