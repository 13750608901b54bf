# frontend/state.py
"""
Application state shell.

Holds what the screens render (profile, accounts, transactions, language,
display flags) and runs every mutation through the API client. Server first;
if the server call fails the change is still applied locally and nothing is
rolled back or retried.
"""
import logging
import time
import uuid
from concurrent.futures import ThreadPoolExecutor

from pocket_ledger.constants import DEFAULT_LANGUAGE, DEFAULT_MEMBERSHIP

from .api_client import ApiError

logger = logging.getLogger("ledger-frontend")

LOGGED_OUT = "logged-out"
LOADING = "loading"
READY = "ready"


def _empty_user():
    return {"name": "", "avatar": "", "membership": ""}


def _local_id():
    return f"local-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


class AppState:
    def __init__(self, api, reconcile_on_failure=False):
        self.api = api
        # force a reload after a failed mutation instead of trusting the local patch
        self.reconcile_on_failure = reconcile_on_failure
        self.mode = LOGGED_OUT
        self.user = _empty_user()
        self.language = DEFAULT_LANGUAGE
        self.accounts = []
        self.transactions = []
        self.is_amount_visible = True
        self.last_error = None

    @property
    def is_logged_in(self):
        return self.mode != LOGGED_OUT

    # ---------------- Session ----------------
    def restore(self):
        """Resume a persisted session, if any."""
        if self.api.session.is_authenticated:
            self.load_data()
        return self.mode

    def login(self, email, password):
        self.api.login(email, password)
        self.load_data()
        return self.mode

    def register(self, email, password, name=None):
        data = self.api.register(email, password, name)
        if data.get("session"):
            self.load_data()
        return self.mode

    def logout(self):
        try:
            self.api.logout()
        except ApiError as e:
            logger.error(f"Logout error: {e}")
        finally:
            self.api.session.clear()
            self._reset()

    def _reset(self):
        self.mode = LOGGED_OUT
        self.accounts = []
        self.transactions = []
        self.user = _empty_user()

    # ---------------- Loading ----------------
    def _fetch_all(self):
        with ThreadPoolExecutor(max_workers=3) as pool:
            profile = pool.submit(self.api.get_profile)
            accounts = pool.submit(self.api.get_accounts)
            transactions = pool.submit(self.api.get_transactions)
            return profile.result(), accounts.result(), transactions.result()

    def _apply(self, profile, accounts, transactions):
        self.user = {
            "name": profile.get("name") or "",
            "avatar": profile.get("avatar") or "",
            "membership": profile.get("membership") or DEFAULT_MEMBERSHIP,
        }
        self.language = profile.get("language") or DEFAULT_LANGUAGE
        self.accounts = list(accounts)
        self.transactions = list(transactions)

    def load_data(self):
        """
        Fetch profile, accounts and transactions in parallel.

        Any failure is treated as an expired session: tokens are dropped and
        the shell goes back to logged-out.
        """
        self.mode = LOADING
        try:
            self._apply(*self._fetch_all())
        except ApiError as e:
            logger.error(f"Failed to load data: {e}")
            self.last_error = e.message
            self.api.session.clear()
            self._reset()
            return False
        self.mode = READY
        return True

    def sync(self):
        """Reload after a mutation; a failure here is logged and ignored."""
        try:
            self._apply(*self._fetch_all())
        except ApiError as e:
            logger.error(f"Background reload failed: {e}")
            return False
        return True

    def _failed(self, action, error):
        logger.error(f"Failed to {action}: {error}")
        self.last_error = error.message
        if self.reconcile_on_failure:
            self.sync()

    # ---------------- Accounts ----------------
    def add_account(self, account):
        try:
            created = self.api.create_account(account)
        except ApiError as e:
            local = dict(account)
            local.setdefault("id", _local_id())
            self.accounts.append(local)
            self._failed("create account", e)
            return local
        self.accounts.append(created)
        return created

    def update_account(self, account):
        try:
            updated = self.api.update_account(account["id"], account)
        except ApiError as e:
            updated = account
            self._replace(self.accounts, updated)
            self._failed("update account", e)
            return updated
        self._replace(self.accounts, updated)
        return updated

    def delete_account(self, account_id):
        try:
            self.api.delete_account(account_id)
        except ApiError as e:
            self._failed("delete account", e)
            return False
        self.accounts = [a for a in self.accounts if a.get("id") != account_id]
        self.sync()
        return True

    # ---------------- Transactions ----------------
    def _account_label(self, account):
        return account.get("name") if self.language == "zh" else account.get("nameEn")

    def add_transaction(self, tx):
        try:
            created = self.api.create_transaction(tx)
        except ApiError as e:
            local = dict(tx)
            local["id"] = _local_id()
            local.setdefault("time", local.get("date"))
            self.transactions.insert(0, local)
            self._failed("create transaction", e)
            return local

        self.transactions.insert(0, created)
        # mirror the store's balance trigger until the next reload
        change = created["amount"] if created["type"] == "income" else -created["amount"]
        for acc in self.accounts:
            if self._account_label(acc) == created.get("account"):
                acc["balance"] = float(acc.get("balance") or 0) + change
                acc["lastChange"] = change
        return created

    def update_transaction(self, tx):
        try:
            updated = self.api.update_transaction(tx["id"], tx)
        except ApiError as e:
            self._replace(self.transactions, tx)
            self._failed("update transaction", e)
            return tx
        self._replace(self.transactions, updated)
        self.sync()
        return updated

    def delete_transaction(self, tx_id):
        try:
            self.api.delete_transaction(tx_id)
        except ApiError as e:
            self._failed("delete transaction", e)
            return False
        self.transactions = [t for t in self.transactions if t.get("id") != tx_id]
        self.sync()
        return True

    # ---------------- Profile ----------------
    def update_profile(self, user):
        try:
            self.api.update_profile({
                "name": user.get("name", ""),
                "avatar": user.get("avatar", ""),
                "membership": user.get("membership", ""),
            })
        except ApiError as e:
            logger.error(f"Failed to update profile: {e}")
        self.user = dict(user)

    def toggle_language(self):
        self.language = "en" if self.language == "zh" else "zh"
        try:
            self.api.update_profile({"language": self.language})
        except ApiError as e:
            logger.error(f"Failed to save language preference: {e}")
        return self.language

    def toggle_amount_visibility(self):
        self.is_amount_visible = not self.is_amount_visible
        return self.is_amount_visible

    @staticmethod
    def _replace(rows, row):
        for i, existing in enumerate(rows):
            if existing.get("id") == row.get("id"):
                rows[i] = row
                return
