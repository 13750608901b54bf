"""HTTP surface of the ledger backend, exercised through Flask's test client."""
import pytest

from conftest import register


def test_register_returns_user_and_session(client):
    body, _ = register(client, email="Bob@Example.com", name=None)
    assert body["user"]["email"] == "bob@example.com"
    assert body["user"]["name"] == "bob"
    assert body["session"]["access_token"]
    assert body["session"]["refresh_token"]


def test_register_requires_email_and_password(client):
    resp = client.post("/api/auth/register", json={"email": "x@example.com"})
    assert resp.status_code == 400
    assert "Email and password required" in resp.get_json()["error"]


def test_register_duplicate_email_is_store_error(client):
    register(client)
    resp = client.post("/api/auth/register", json={"email": "alice@example.com", "password": "secret123"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "User already registered"


def test_login_success_and_failure(client):
    register(client)
    ok = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret123"})
    assert ok.status_code == 200
    assert ok.get_json()["session"]["access_token"]

    bad = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "nope-nope"})
    assert bad.status_code == 401
    assert bad.get_json()["error"] == "Invalid login credentials"


def test_missing_or_malformed_header_is_401(client):
    resp = client.get("/api/accounts")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "未登录 / Not authenticated"

    resp = client.get("/api/accounts", headers={"Authorization": "Token abc"})
    assert resp.status_code == 401


def test_invalid_token_is_401(client):
    resp = client.get("/api/accounts", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "无效的令牌 / Invalid token"


def test_me_returns_caller(client, auth):
    resp = client.get("/api/auth/me", headers=auth)
    assert resp.status_code == 200
    assert resp.get_json()["user"]["email"] == "alice@example.com"


def test_logout_revokes_access_token(client, auth):
    resp = client.post("/api/auth/logout", headers=auth)
    assert resp.status_code == 200
    assert resp.get_json()["message"] == "已登出 / Logged out"

    again = client.get("/api/auth/me", headers=auth)
    assert again.status_code == 401


def test_refresh_issues_new_session(client):
    body, _ = register(client)
    refresh = {"Authorization": f"Bearer {body['session']['refresh_token']}"}
    resp = client.post("/api/auth/refresh", headers=refresh)
    assert resp.status_code == 200
    session = resp.get_json()["session"]
    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {session['access_token']}"})
    assert me.status_code == 200

    # refresh tokens are single-use
    assert client.post("/api/auth/refresh", headers=refresh).status_code == 401


def test_profile_created_on_register_and_updated(client):
    _, headers = register(client, name="Alice")
    profile = client.get("/api/profile", headers=headers).get_json()
    assert profile["name"] == "Alice"
    assert profile["language"] == "zh"
    assert profile["membership"] == "普通会员"

    resp = client.put("/api/profile", headers=headers, json={"language": "en"})
    assert resp.status_code == 200
    updated = resp.get_json()
    assert updated["language"] == "en"
    # untouched fields survive a partial update
    assert updated["name"] == "Alice"


def test_profile_rejects_unknown_language(client, auth):
    resp = client.put("/api/profile", headers=auth, json={"language": "fr"})
    assert resp.status_code == 400


def test_create_account_applies_defaults_and_round_trips(client, auth):
    resp = client.post("/api/accounts", headers=auth, json={"name": "现金"})
    assert resp.status_code == 200
    created = resp.get_json()
    assert created["nameEn"] == "现金"
    assert created["type"] == "Custom"
    assert created["color"] == "#137fec"
    assert created["icon"] == "account_balance_wallet"
    assert created["status"] == "Active"
    assert created["balance"] == 0

    listed = client.get("/api/accounts", headers=auth).get_json()
    assert listed == [created]
    assert "name_en" not in listed[0]


def test_create_account_requires_name(client, auth):
    resp = client.post("/api/accounts", headers=auth, json={"balance": 10})
    assert resp.status_code == 400


def test_accounts_listed_in_creation_order(client, auth):
    for name in ("Cash", "Bank", "Alipay"):
        client.post("/api/accounts", headers=auth, json={"name": name})
    names = [a["name"] for a in client.get("/api/accounts", headers=auth).get_json()]
    assert names == ["Cash", "Bank", "Alipay"]


def test_update_account_is_partial(client, auth):
    acc = client.post("/api/accounts", headers=auth, json={"name": "Bank", "balance": 100}).get_json()
    resp = client.put(f"/api/accounts/{acc['id']}", headers=auth, json={"status": "Frozen"})
    assert resp.status_code == 200
    updated = resp.get_json()
    assert updated["status"] == "Frozen"
    assert updated["balance"] == 100
    assert updated["name"] == "Bank"


def test_accounts_are_scoped_to_owner(client, auth):
    acc = client.post("/api/accounts", headers=auth, json={"name": "Bank"}).get_json()
    _, other = register(client, email="mallory@example.com")

    assert client.get("/api/accounts", headers=other).get_json() == []
    assert client.put(f"/api/accounts/{acc['id']}", headers=other, json={"balance": 1}).status_code == 400
    assert client.delete(f"/api/accounts/{acc['id']}", headers=other).status_code == 400
    assert len(client.get("/api/accounts", headers=auth).get_json()) == 1

    assert client.delete(f"/api/accounts/{acc['id']}", headers=auth).get_json() == {"message": "Deleted"}
    assert client.get("/api/accounts", headers=auth).get_json() == []


def test_create_transaction_mirrors_time_and_defaults(client, auth):
    resp = client.post("/api/transactions", headers=auth, json={
        "type": "expense", "amount": 85.2, "category": "餐饮", "date": "2026-02-26",
    })
    assert resp.status_code == 200
    tx = resp.get_json()
    assert tx["date"] == "2026-02-26"
    assert tx["time"] == "2026-02-26"
    assert tx["amount"] == 85.2
    assert tx["categoryIcon"] == ""
    assert tx["account"] == ""
    assert tx["note"] == ""


def test_create_transaction_accepts_time_as_date(client, auth):
    tx = client.post("/api/transactions", headers=auth, json={
        "type": "income", "amount": "12.50", "category": "Food", "time": "2025-12-31",
    }).get_json()
    assert tx["date"] == "2025-12-31"
    assert tx["amount"] == 12.5


def test_create_transaction_validation(client, auth):
    missing = client.post("/api/transactions", headers=auth, json={"type": "expense", "amount": 1})
    assert missing.status_code == 400

    bad_type = client.post("/api/transactions", headers=auth, json={"type": "gift", "amount": 1, "category": "x"})
    assert bad_type.status_code == 400

    negative = client.post("/api/transactions", headers=auth, json={"type": "expense", "amount": -3, "category": "x"})
    assert negative.status_code == 400


def test_transactions_listed_newest_first(client, auth):
    for note in ("first", "second", "third"):
        client.post("/api/transactions", headers=auth, json={
            "type": "expense", "amount": 1, "category": "x", "note": note,
        })
    notes = [t["note"] for t in client.get("/api/transactions", headers=auth).get_json()]
    assert notes == ["third", "second", "first"]


def test_balance_follows_transaction_lifecycle(client, auth):
    acc = client.post("/api/accounts", headers=auth, json={"name": "招商银行", "nameEn": "Bank", "balance": 1000}).get_json()

    def balance():
        return client.get("/api/accounts", headers=auth).get_json()[0]["balance"]

    tx = client.post("/api/transactions", headers=auth, json={
        "type": "expense", "amount": 200, "category": "购物", "account": "Bank",
    }).get_json()
    assert balance() == 800

    client.put(f"/api/transactions/{tx['id']}", headers=auth, json={"type": "income"})
    assert balance() == 1200

    client.delete(f"/api/transactions/{tx['id']}", headers=auth)
    assert balance() == 1000

    client.post("/api/transactions", headers=auth, json={
        "type": "income", "amount": 50, "category": "薪资", "accountId": acc["id"],
    })
    assert balance() == 1050


def test_update_transaction_is_partial(client, auth):
    tx = client.post("/api/transactions", headers=auth, json={
        "type": "expense", "amount": 10, "category": "Food", "note": "lunch", "date": "2026-03-01",
    }).get_json()
    updated = client.put(f"/api/transactions/{tx['id']}", headers=auth, json={"amount": 12}).get_json()
    assert updated["amount"] == 12
    assert updated["note"] == "lunch"
    assert updated["time"] == "2026-03-01"


def test_deleting_another_users_transaction_changes_nothing(client, auth):
    tx = client.post("/api/transactions", headers=auth, json={
        "type": "expense", "amount": 10, "category": "Food",
    }).get_json()
    _, other = register(client, email="mallory@example.com")

    resp = client.delete(f"/api/transactions/{tx['id']}", headers=other)
    assert resp.status_code == 400
    assert "message" not in resp.get_json()
    assert [t["id"] for t in client.get("/api/transactions", headers=auth).get_json()] == [tx["id"]]


def test_delete_unknown_transaction_is_error(client, auth):
    resp = client.delete("/api/transactions/does-not-exist", headers=auth)
    assert resp.status_code == 400


def test_health_and_categories(client):
    assert client.get("/api/health").get_json() == {"status": "ok"}
    categories = client.get("/api/categories").get_json()["categories"]
    assert len(categories) == 8
    assert categories[0]["id"] == "food"


@pytest.mark.parametrize("amount", ["Infinity", "-inf", "NaN", 1e999])
def test_non_finite_amount_is_rejected(client, auth, amount):
    acc = client.post("/api/accounts", headers=auth, json={"name": "Cash", "balance": 100}).get_json()
    resp = client.post("/api/transactions", headers=auth, json={
        "type": "expense", "amount": amount, "category": "Food", "accountId": acc["id"],
    })
    assert resp.status_code == 400
    assert client.get("/api/accounts", headers=auth).get_json()[0]["balance"] == 100

    ok = client.post("/api/transactions", headers=auth, json={
        "type": "expense", "amount": 1, "category": "Food", "accountId": acc["id"],
    })
    assert ok.status_code == 200


def test_non_finite_balance_is_rejected(client, auth):
    resp = client.post("/api/accounts", headers=auth, json={"name": "Cash", "balance": "inf"})
    assert resp.status_code == 400


@pytest.mark.parametrize("bad_date", ["2026-13-45", "03/01/2026", "yesterday"])
def test_malformed_date_is_rejected(client, auth, bad_date):
    resp = client.post("/api/transactions", headers=auth, json={
        "type": "expense", "amount": 1, "category": "Food", "date": bad_date,
    })
    assert resp.status_code == 400


@pytest.mark.parametrize("empty", [None, ""])
def test_update_with_empty_date_keeps_stored_date(client, auth, empty):
    tx = client.post("/api/transactions", headers=auth, json={
        "type": "expense", "amount": 10, "category": "Food", "date": "2020-01-01",
    }).get_json()
    resp = client.put(f"/api/transactions/{tx['id']}", headers=auth, json={"date": empty})
    assert resp.status_code == 400
    assert client.get("/api/transactions", headers=auth).get_json()[0]["date"] == "2020-01-01"
