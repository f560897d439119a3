from conftest import member_data


def test_get_member(client, member, member_headers):
    resp = client.get(f"/member/{member['id']}", headers=member_headers)

    assert resp.status_code == 200
    user = resp.get_json()["user"]
    assert user["id"] == member["id"]
    assert user["role"] == "user"
    assert "password" not in user


def test_get_member_invalid_or_missing(client, member_headers):
    assert client.get("/member/abc", headers=member_headers).status_code == 400
    assert client.get("/member/999", headers=member_headers).status_code == 404


def test_get_member_requires_token(client, member):
    assert client.get(f"/member/{member['id']}").status_code == 401


def test_member_cannot_update_or_delete(client, member, member_headers):
    url = f"/member/{member['id']}"
    assert client.patch(url, json={"name": "New Name"}, headers=member_headers).status_code == 403
    assert client.delete(url, headers=member_headers).status_code == 403


def test_admin_updates_member(client, member, admin_headers):
    resp = client.patch(f"/member/{member['id']}", json={"address": "2 Other Street"}, headers=admin_headers)

    assert resp.status_code == 200
    assert resp.get_json()["user"]["address"] == "2 Other Street"


def test_admin_update_validation(client, member, admin_headers):
    url = f"/member/{member['id']}"
    assert client.patch(url, json={"age": 3}, headers=admin_headers).status_code == 400
    assert client.patch(url, json={}, headers=admin_headers).status_code == 400
    assert client.patch("/member/999", json={"age": 30}, headers=admin_headers).status_code == 404


def test_admin_update_duplicate_email(client, admin, member, admin_headers):
    resp = client.patch(
        f"/member/{member['id']}", json={"email": member_data(900)["email"]}, headers=admin_headers
    )
    assert resp.status_code == 409


def test_admin_deletes_member(client, member, admin_headers):
    url = f"/member/{member['id']}"

    resp = client.delete(url, headers=admin_headers)

    assert resp.status_code == 200
    assert resp.get_json()["user"]["id"] == member["id"]
    assert client.get(url, headers=admin_headers).status_code == 404
    assert client.delete(url, headers=admin_headers).status_code == 404


def test_list_members_admin_only(client, admin, member, admin_headers, member_headers):
    assert client.get("/members", headers=member_headers).status_code == 403

    resp = client.get("/members?searchText=ada", headers=admin_headers)
    assert resp.status_code == 200
    assert [m["id"] for m in resp.get_json()["items"]] == [admin["id"]]

    everyone = client.get("/members", headers=admin_headers).get_json()
    assert everyone["pagination"]["total"] == 2


def test_admin_update_with_null_field_is_rejected(client, member, admin_headers):
    resp = client.patch(f"/member/{member['id']}", json={"password": None}, headers=admin_headers)

    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "message": "password cannot be null"}


def test_register_rejects_case_variant_of_existing_email(client, member):
    resp = client.post("/register", json=member_data(2, email="MEMBER1@Library.org"))
    assert resp.status_code == 409
