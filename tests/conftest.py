import pytest

from app import create_app


@pytest.fixture
def app(tmp_path):
    """App on a throwaway SQLite file with CSRF disabled for easier testing"""
    app = create_app({
        "TESTING": True,
        "DATABASE_URL": f"sqlite:///{tmp_path / 'expenses.db'}",
        "CREATE_TABLES": True,
        "WTF_CSRF_ENABLED": False,
        "SESSION_COOKIE_SECURE": False,
    })
    yield app
    app.extensions["db_engine"].dispose()


def signup_and_login(app, username, password="password"):
    client = app.test_client()
    client.post("/api/auth/signup", json={"username": username, "password": password})
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200
    return client


@pytest.fixture
def client(app):
    """Logged-in client for user 'erez'"""
    return signup_and_login(app, "erez")


@pytest.fixture
def other_client(app):
    """Logged-in client for a second user, 'lia'"""
    return signup_and_login(app, "lia")


def make_category(client, name):
    response = client.post("/api/categories/create", json={"name": name})
    assert response.status_code == 200
    return response.get_json()["data"]["id"]


def add_expense(client, category, money, created_at, note=None):
    response = client.post("/api/expenses/create", json={
        "category": category,
        "money": money,
        "created_at": created_at,
        "note": note,
    })
    assert response.status_code == 200, response.get_json()
    return response.get_json()["data"]
