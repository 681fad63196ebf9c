from taskboard.security import create_token
from taskboard.settings import get_settings


def register(client, email="ada@example.com", password="secret123"):
    return client.post("/auth/register", json={"email": email, "password": password})


class TestRegister:
    def test_register_sets_cookie_and_returns_user(self, client):
        res = register(client)
        assert res.status_code == 201
        user = res.json()["user"]
        assert user["email"] == "ada@example.com"
        assert isinstance(user["id"], str) and user["id"]
        assert "password" not in res.text

        cookie = res.headers["set-cookie"].lower()
        assert cookie.startswith("authtoken=")
        assert "httponly" in cookie
        assert "samesite=lax" in cookie
        assert "max-age=604800" in cookie
        assert "path=/" in cookie

    def test_register_signs_in(self, client, signup):
        user = signup(client, "ada@example.com")
        res = client.get("/auth/me")
        assert res.status_code == 200
        assert res.json() == {"id": user["id"], "email": "ada@example.com"}

    def test_duplicate_email(self, client, make_client):
        assert register(client).status_code == 201
        res = register(make_client(), password="another-one")
        assert res.status_code == 409
        assert res.json()["error"] == "AlreadyExists"

    def test_email_is_case_sensitive(self, client, make_client):
        assert register(client, email="Ada@example.com").status_code == 201
        assert register(make_client(), email="ada@example.com").status_code == 201

    def test_invalid_input(self, client):
        assert register(client, email="", password="secret123").status_code == 400
        assert register(client, email="ada@example.com", password="").status_code == 400
        res = register(client, password="12345")
        assert res.status_code == 400
        assert res.json() == {"error": "InvalidInput", "detail": "Password must be at least 6 characters"}
        assert client.post("/auth/register", json={}).status_code == 400

    def test_six_character_password_is_enough(self, client):
        assert register(client, password="123456").status_code == 201


class TestLogin:
    def test_login_success(self, client, make_client, signup):
        user = signup(client, "ada@example.com", "secret123")

        other = make_client()
        res = other.post("/auth/login", json={"email": "ada@example.com", "password": "secret123"})
        assert res.status_code == 200
        assert res.json() == {"user": {"id": user["id"], "email": "ada@example.com"}}
        assert other.get("/auth/me").json()["id"] == user["id"]

    def test_wrong_password_and_unknown_email_look_the_same(self, client, signup):
        signup(client, "ada@example.com", "secret123")
        wrong = client.post("/auth/login", json={"email": "ada@example.com", "password": "nope-nope"})
        unknown = client.post("/auth/login", json={"email": "who@example.com", "password": "secret123"})
        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json() == {"error": "InvalidCredentials", "detail": "Invalid credentials"}
        assert "set-cookie" not in wrong.headers

    def test_missing_fields(self, client):
        assert client.post("/auth/login", json={"email": "ada@example.com"}).status_code == 400
        assert client.post("/auth/login", json={"password": "secret123"}).status_code == 400


class TestMeAndLogout:
    def test_me_requires_identity(self, client):
        res = client.get("/auth/me")
        assert res.status_code == 401
        assert res.json()["error"] == "Unauthenticated"

    def test_me_for_deleted_user(self, client):
        client.cookies.set("authToken", create_token("ghost", get_settings()))
        res = client.get("/auth/me")
        assert res.status_code == 404
        assert res.json()["detail"] == "User not found"

    def test_bearer_header_is_not_accepted(self, client, make_client, signup):
        signup(client, "ada@example.com")
        token = client.cookies.get("authToken")
        assert token

        stranger = make_client()
        res = stranger.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 401

    def test_logout_clears_cookie(self, client, signup):
        signup(client, "ada@example.com")
        res = client.post("/auth/logout")
        assert res.status_code == 200
        assert res.json() == {"success": True}
        cookie = res.headers["set-cookie"].lower()
        assert cookie.startswith("authtoken=")
        assert "max-age=0" in cookie

    def test_logout_without_identity(self, client):
        assert client.post("/auth/logout").status_code == 200
