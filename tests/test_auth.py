import pytest


@pytest.mark.parametrize(
    "role, dashboard",
    [("user", "/dashboard/user"), ("security", "/dashboard/security"), ("admin", "/dashboard/admin")],
)
def test_login_redirects_to_role_dashboard(client, make_account, role, dashboard):
    account = make_account(role, username="sam", password="secret123")

    response = client.post("/login", data={"username": "sam", "password": "secret123", "role": role})

    assert response.status_code == 302
    assert response.headers["Location"].endswith(dashboard)
    with client.session_transaction() as sess:
        assert sess["user"]["id"] == account.id
        assert sess["user"]["role"] == role


def test_wrong_password_is_rejected(client, make_account):
    make_account("user", username="sam", password="secret123")

    response = client.post("/login", data={"username": "sam", "password": "nope", "role": "user"})

    assert response.status_code == 401
    assert b"Invalid username or password" in response.data
    with client.session_transaction() as sess:
        assert "user" not in sess


def test_credentials_are_checked_against_the_selected_role(client, make_account):
    make_account("user", username="sam", password="secret123")

    response = client.post("/login", data={"username": "sam", "password": "secret123", "role": "admin"})

    assert response.status_code == 401


def test_passwords_are_not_stored_in_plain_text(app, make_account):
    account = make_account("user", password="secret123")
    assert account.password_hash != "secret123"
    assert account.check_password("secret123")


def test_protected_page_requires_login(client):
    response = client.get("/dashboard/security")

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/login")


def test_wrong_role_goes_to_own_dashboard(client, make_account, login):
    login(make_account("user"))

    response = client.get("/dashboard/admin")

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/dashboard/user")


def test_login_page_redirects_when_signed_in(client, make_account, login):
    login(make_account("security"))

    response = client.get("/login")

    assert response.headers["Location"].endswith("/dashboard/security")


def test_logout_clears_session(client, make_account, login):
    login(make_account("admin"))

    response = client.get("/logout")

    assert response.headers["Location"].endswith("/login")
    with client.session_transaction() as sess:
        assert "user" not in sess
