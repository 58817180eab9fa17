from datetime import date

import pytest

from config import Config
from lostfound import create_app, db
from lostfound.auth.models import Admin, SecurityStaff, User
from lostfound.reports.models import FoundItem, LostItem


@pytest.fixture
def app(tmp_path):
    class TestConfig(Config):
        TESTING = True
        SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
        SECRET_KEY = "test-secret"
        WTF_CSRF_ENABLED = False
        UPLOAD_FOLDER = str(tmp_path / "uploads")
        NOTIFICATION_STORAGE_DIR = str(tmp_path / "notifications")

    flask_app = create_app(TestConfig)
    with flask_app.app_context():
        db.create_all()
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_account():
    counter = {"n": 0}

    def _make(role="user", username=None, password="password123", name=None):
        counter["n"] += 1
        n = counter["n"]
        model = {"user": User, "security": SecurityStaff, "admin": Admin}[role]
        account = model(name=name or f"{role.title()} {n}", username=username or f"{role}{n}")
        if role != "admin":
            account.nim_nip = f"NIM{role}{n}"
        account.set_password(password)
        db.session.add(account)
        db.session.commit()
        return account

    return _make


@pytest.fixture
def make_report():
    def _make(owner, report_type="lost", status="reported", **fields):
        model = LostItem if report_type == "lost" else FoundItem
        values = {
            "name": "Black Laptop Bag",
            "category": "accessories",
            "description": "Black bag with a blue sticker",
            "location": "Library 3rd floor",
            "event_date": date(2026, 1, 10),
        }
        values.update(fields)
        report = model(user_id=owner.id, status=status, **values)
        db.session.add(report)
        db.session.commit()
        return report

    return _make


@pytest.fixture
def login(client):
    def _login(account):
        with client.session_transaction() as sess:
            sess["user"] = account.to_session()
        return client

    return _login
