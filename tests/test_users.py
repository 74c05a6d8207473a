from .helpers import count_rows, login, signup


def test_signup_logs_in_and_welcomes(client):
    response = signup(client, "alice", email="a@x.com", password="p1")

    assert response.status_code == 302
    assert response.headers["location"] == "/listings"
    page = client.get("/listings").text
    assert "Welcome to Wanderlust!" in page
    assert "Signed in as alice" in page
    assert client.get("/listings/new", follow_redirects=False).status_code == 200


def test_signup_duplicate_username(client, other_client):
    signup(client, "alice")

    response = signup(other_client, "alice", email="other@x.com")

    assert response.status_code == 302
    assert response.headers["location"] == "/signup"
    assert "A user with the given username is already registered" in other_client.get("/signup").text
    assert other_client.get("/listings/new", follow_redirects=False).status_code == 302


def test_signup_rejects_invalid_email(client):
    response = signup(client, "alice", email="not-an-email")

    assert response.headers["location"] == "/signup"
    assert "String should match pattern" in client.get("/signup").text
    assert count_rows("users") == 0


def test_login_with_wrong_password(client, other_client):
    signup(client, "alice", password="right")

    response = login(other_client, "alice", password="wrong")

    assert response.status_code == 302
    assert response.headers["location"] == "/login"
    assert "Password or username is incorrect" in other_client.get("/login").text
    assert other_client.get("/listings/new", follow_redirects=False).headers["location"] == "/login"


def test_login_with_unknown_user(client):
    response = login(client, "ghost")

    assert response.headers["location"] == "/login"


def test_login_success(client, other_client):
    signup(client, "alice")

    response = login(other_client, "alice")

    assert response.status_code == 302
    assert response.headers["location"] == "/listings"
    assert "Welcome back!" in other_client.get("/listings").text


def test_login_returns_to_originally_requested_page(client):
    signup(client, "alice")
    client.get("/logout")

    denied = client.get("/listings/new?ref=nav", follow_redirects=False)
    assert denied.headers["location"] == "/login"

    response = login(client, "alice")
    assert response.headers["location"] == "/listings/new?ref=nav"

    # The stored target is used once only.
    client.get("/logout")
    assert login(client, "alice").headers["location"] == "/listings"


def test_login_changes_session_cookie(client, other_client):
    signup(client, "alice")
    other_client.get("/listings/new")
    before = other_client.cookies.get("session")

    login(other_client, "alice")

    assert other_client.cookies.get("session") != before


def test_logout(client):
    signup(client, "alice")

    response = client.get("/logout", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/listings"
    page = client.get("/listings").text
    assert "Logged out successfully!" in page
    assert "Signed in as" not in page
    assert client.get("/listings/new", follow_redirects=False).headers["location"] == "/login"


def test_logout_requires_login(client):
    response = client.get("/logout", follow_redirects=False)

    assert response.headers["location"] == "/login"


def test_anonymous_logout_is_not_a_return_target(client):
    signup(client, "alice")
    client.get("/logout")

    denied = client.get("/logout", follow_redirects=False)
    assert denied.headers["location"] == "/login"

    response = login(client, "alice")
    assert response.headers["location"] == "/listings"
    assert client.get("/listings/new", follow_redirects=False).status_code == 200


def test_login_ignores_surrounding_whitespace_in_username(client):
    signup(client, "alice ", email="alice@x.com")
    client.get("/logout")

    response = login(client, " alice ")

    assert response.headers["location"] == "/listings"
    assert "Welcome back!" in client.get("/listings").text
