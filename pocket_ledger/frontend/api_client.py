# frontend/api_client.py
"""
Client data-access layer: one method per API route.

Tokens live on an explicit ``Session`` handed to the client rather than in
global storage. A session can be backed by a ``TokenStore`` so the two
tokens survive restarts (the equivalent of browser local storage).
"""
import json
import logging
import os
from pathlib import Path
from typing import List, Optional

import requests

from pocket_ledger.models import Account, AuthResponse, Profile, Transaction, User

logger = logging.getLogger("ledger-frontend")

API_BASE = os.environ.get("LEDGER_API_BASE", "http://localhost:7879/api")
TOKEN_FILE = os.environ.get(
    "LEDGER_TOKEN_FILE", str(Path.home() / ".pocket_ledger" / "tokens.json")
)

NETWORK_ERROR = "网络请求失败 / Network request failed"
ACCESS_TOKEN_KEY = "access_token"
REFRESH_TOKEN_KEY = "refresh_token"


class ApiError(Exception):
    def __init__(self, message, status=None):
        super().__init__(message)
        self.message = message
        self.status = status


class TokenStore:
    """Persists the access and refresh tokens in a small JSON file."""

    def __init__(self, path=TOKEN_FILE):
        self.path = Path(path)

    def load(self):
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (FileNotFoundError, json.JSONDecodeError):
            return {}
        return data if isinstance(data, dict) else {}

    def save(self, access_token, refresh_token):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({ACCESS_TOKEN_KEY: access_token, REFRESH_TOKEN_KEY: refresh_token}, f)

    def clear(self):
        self.path.unlink(missing_ok=True)


class Session:
    def __init__(self, access_token=None, refresh_token=None, store=None):
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.store = store

    @classmethod
    def from_store(cls, store):
        data = store.load()
        return cls(data.get(ACCESS_TOKEN_KEY), data.get(REFRESH_TOKEN_KEY), store=store)

    @property
    def is_authenticated(self):
        return bool(self.access_token)

    def set_tokens(self, access_token, refresh_token):
        self.access_token = access_token
        self.refresh_token = refresh_token
        if self.store is not None:
            self.store.save(access_token, refresh_token)

    def clear(self):
        self.access_token = None
        self.refresh_token = None
        if self.store is not None:
            self.store.clear()


def safe_json(resp):
    try:
        return resp.json()
    except ValueError:
        return None


class ApiClient:
    def __init__(self, base_url=API_BASE, session=None, http=None, timeout=10):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else Session()
        # the requests module opens a fresh session per call; safe across threads
        self.http = http if http is not None else requests
        self.timeout = timeout

    def request(self, method, path, json=None, token=None):
        headers = {"Content-Type": "application/json"}
        token = token or self.session.access_token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        url = self.base_url + path

        try:
            response = self.http.request(
                method, url, headers=headers, json=json, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"❌ {method} {path} failed: {e}")
            raise ApiError(NETWORK_ERROR) from e

        data = safe_json(response)
        if not response.ok:
            message = data.get("error") if isinstance(data, dict) else None
            raise ApiError(message or f"请求失败 ({response.status_code})", response.status_code)
        return data

    # ---------------- Auth ----------------
    def _remember(self, data):
        session = (data or {}).get("session")
        if session:
            self.session.set_tokens(session["access_token"], session["refresh_token"])
        return data

    def register(self, email, password, name=None) -> AuthResponse:
        data = self.request(
            "POST", "/auth/register", {"email": email, "password": password, "name": name}
        )
        return self._remember(data)

    def login(self, email, password) -> AuthResponse:
        data = self.request("POST", "/auth/login", {"email": email, "password": password})
        return self._remember(data)

    def refresh(self):
        if not self.session.refresh_token:
            raise ApiError("未登录 / Not authenticated", 401)
        data = self.request("POST", "/auth/refresh", token=self.session.refresh_token)
        return self._remember(data)

    def logout(self) -> None:
        try:
            self.request("POST", "/auth/logout")
        finally:
            self.session.clear()

    def get_me(self) -> User:
        return self.request("GET", "/auth/me")["user"]

    # ---------------- Profile ----------------
    def get_profile(self) -> Profile:
        return self.request("GET", "/profile")

    def update_profile(self, profile) -> Profile:
        return self.request("PUT", "/profile", profile)

    # ---------------- Accounts ----------------
    def get_accounts(self) -> List[Account]:
        return self.request("GET", "/accounts")

    def create_account(self, account) -> Account:
        payload = {k: v for k, v in account.items() if k != "id"}
        return self.request("POST", "/accounts", payload)

    def update_account(self, account_id, account) -> Account:
        return self.request("PUT", f"/accounts/{account_id}", account)

    def delete_account(self, account_id) -> None:
        self.request("DELETE", f"/accounts/{account_id}")

    # ---------------- Transactions ----------------
    def get_transactions(self) -> List[Transaction]:
        return self.request("GET", "/transactions")

    def create_transaction(self, tx) -> Transaction:
        payload = {k: v for k, v in tx.items() if k not in ("id", "time")}
        return self.request("POST", "/transactions", payload)

    def update_transaction(self, tx_id, tx) -> Transaction:
        return self.request("PUT", f"/transactions/{tx_id}", tx)

    def delete_transaction(self, tx_id) -> None:
        self.request("DELETE", f"/transactions/{tx_id}")

    def get_categories(self) -> Optional[list]:
        return self.request("GET", "/categories").get("categories")
