from datetime import timedelta

from conftest import PASSWORD, member_data
from repositories.member_repository import MemberRepository
from utils.auth_utils import generate_access_token, verify_access_token


def _register(client, **overrides):
    return client.post("/register", json=member_data(1, **overrides))


def _login(client, email="member1@library.org", password=PASSWORD):
    return client.post("/login", json={"email": email, "password": password})


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


# ==================== Register ====================

def test_register_returns_id(client):
    resp = _register(client)

    assert resp.status_code == 201, resp.text
    body = resp.get_json()
    assert body["success"] is True
    assert isinstance(body["id"], int)


def test_register_validation_error(client):
    resp = _register(client, age=200)

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False
    assert "age" in resp.get_json()["message"]


def test_register_without_body(client):
    resp = client.post("/register", data="not json", content_type="text/plain")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "No body provided"


def test_register_duplicate_email_conflicts(client):
    assert _register(client).status_code == 201

    dup = client.post("/register", json=member_data(2, email="member1@library.org"))
    assert dup.status_code == 409
    assert "already exists" in dup.get_json()["message"]


def test_register_admin_role_is_blocked_by_default(client):
    resp = _register(client, role="admin")
    assert resp.status_code == 403


def test_register_admin_role_when_allowed(app, client):
    app.config["ALLOW_ADMIN_REGISTRATION"] = True

    resp = _register(client, role="admin")

    assert resp.status_code == 201
    with app.app_context():
        assert MemberRepository().get_by_id(resp.get_json()["id"]).is_admin()


# ==================== Login ====================

def test_login_issues_tokens(app, client):
    member_id = _register(client).get_json()["id"]

    resp = _login(client)

    assert resp.status_code == 200, resp.text
    access_token = resp.get_json()["accessToken"]
    with app.app_context():
        claims = verify_access_token(access_token)
        stored = MemberRepository().get_by_id(member_id).refresh_token
    assert claims["userId"] == member_id
    assert claims["role"] == "user"

    set_cookie = resp.headers["Set-Cookie"]
    assert set_cookie.startswith(f"refreshToken_{member_id}={stored}")
    assert "HttpOnly" in set_cookie
    assert "SameSite=Strict" in set_cookie
    assert "Max-Age=432000" in set_cookie


def test_login_is_case_insensitive_on_email(client):
    _register(client)
    assert _login(client, email="Member1@Library.org").status_code == 200


def test_login_unknown_user(client):
    resp = _login(client, email="nobody@library.org")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "User not found"


def test_login_wrong_password(client):
    _register(client)
    resp = _login(client, password="wrong-password")
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid credentials"


def test_login_missing_fields(client):
    resp = client.post("/login", json={"email": "member1@library.org"})
    assert resp.status_code == 400


# ==================== Refresh / Logout ====================

def test_refresh_returns_new_access_token(app, client):
    member_id = _register(client).get_json()["id"]
    access_token = _login(client).get_json()["accessToken"]

    resp = client.post("/refresh", headers=_bearer(access_token))

    assert resp.status_code == 200, resp.text
    with app.app_context():
        assert verify_access_token(resp.get_json()["accessToken"])["userId"] == member_id


def test_refresh_accepts_expired_access_token(app, client):
    member_id = _register(client).get_json()["id"]
    _login(client)
    with app.app_context():
        expired = generate_access_token(member_id, "user", expires_delta=timedelta(seconds=-5))

    assert client.get(f"/member/{member_id}", headers=_bearer(expired)).status_code == 401
    assert client.post("/refresh", headers=_bearer(expired)).status_code == 200


def test_refresh_without_cookie(app, client):
    _register(client)
    access_token = _login(client).get_json()["accessToken"]

    resp = app.test_client().post("/refresh", headers=_bearer(access_token))
    assert resp.status_code == 401


def test_refresh_with_rotated_token_is_forbidden(app, client):
    member_id = _register(client).get_json()["id"]
    access_token = _login(client).get_json()["accessToken"]
    with app.app_context():
        MemberRepository().update_token(member_id, "rotated-elsewhere")

    resp = client.post("/refresh", headers=_bearer(access_token))
    assert resp.status_code == 403


def test_refresh_without_access_token(client):
    _register(client)
    _login(client)
    assert client.post("/refresh").status_code == 401


def test_logout_clears_token_and_cookie(app, client):
    member_id = _register(client).get_json()["id"]
    access_token = _login(client).get_json()["accessToken"]
    assert client.get_cookie(f"refreshToken_{member_id}") is not None

    resp = client.post("/logout", headers=_bearer(access_token))

    assert resp.status_code == 200
    assert client.get_cookie(f"refreshToken_{member_id}") is None
    with app.app_context():
        assert MemberRepository().get_by_id(member_id).refresh_token is None
    assert client.post("/refresh", headers=_bearer(access_token)).status_code == 401


def test_register_login_and_read_profile(client):
    member_id = _register(client).get_json()["id"]
    access_token = _login(client).get_json()["accessToken"]

    resp = client.get(f"/member/{member_id}", headers=_bearer(access_token))

    assert resp.status_code == 200
    user = resp.get_json()["user"]
    assert user["email"] == "member1@library.org"
    assert user["phoneNumber"] == member_data(1)["phoneNumber"]
    assert "password" not in user
    assert "refreshToken" not in user


def test_ann_can_register_login_and_read_profile(client):
    ann = {"name": "Ann", "age": 30, "phoneNumber": "1234567890", "email": "a@x.com",
           "address": "1 Main St", "password": "longpass1"}

    registered = client.post("/register", json=ann)
    assert registered.status_code == 201
    member_id = registered.get_json()["id"]

    login = client.post("/login", json={"email": "a@x.com", "password": "longpass1"})
    assert login.status_code == 200
    assert login.get_json()["accessToken"]
    assert client.get_cookie(f"refreshToken_{member_id}") is not None

    profile = client.get(f"/member/{member_id}", headers=_bearer(login.get_json()["accessToken"]))
    assert profile.status_code == 200
    assert profile.get_json()["user"]["name"] == "Ann"
