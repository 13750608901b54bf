import threading
from types import SimpleNamespace

import pytest

from pocket_ledger.backend.app import create_app
from pocket_ledger.frontend.api_client import ApiClient, Session


@pytest.fixture()
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "DB_PATH": str(tmp_path / "ledger.db"),
        "JWT_SECRET_KEY": "test-secret-key-with-enough-length-for-hs256",
    })
    yield app


@pytest.fixture()
def client(app):
    return app.test_client()


def register(client, email="alice@example.com", password="secret123", name=None):
    resp = client.post("/api/auth/register", json={"email": email, "password": password, "name": name})
    assert resp.status_code == 200, resp.get_json()
    body = resp.get_json()
    return body, {"Authorization": f"Bearer {body['session']['access_token']}"}


@pytest.fixture()
def auth(client):
    _, headers = register(client)
    return headers


class FlaskTransport:
    """Routes requests-style calls into the Flask test client."""

    def __init__(self, test_client, prefix="http://testserver"):
        self.test_client = test_client
        self.prefix = prefix
        self.lock = threading.Lock()
        self.calls = []

    def request(self, method, url, headers=None, json=None, timeout=None):
        path = url[len(self.prefix):]
        self.calls.append((method, path))
        with self.lock:
            resp = self.test_client.open(path, method=method, headers=headers, json=json)
        body = resp.get_json(silent=True)

        def _json():
            if body is None:
                raise ValueError("no json")
            return body

        return SimpleNamespace(
            status_code=resp.status_code,
            ok=200 <= resp.status_code < 400,
            json=_json,
        )


@pytest.fixture()
def api(client):
    return ApiClient(base_url="http://testserver/api", session=Session(), http=FlaskTransport(client))
