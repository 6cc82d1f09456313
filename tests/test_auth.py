"""Registration, login, token refresh and role checks."""

from conftest import PASSWORD, auth_header


def test_register_learner_returns_tokens(register):
    data = register("learner")
    assert data["role"] == "learner"
    assert data["token_type"] == "bearer"
    assert data["access_token"] and data["refresh_token"]


def test_register_duplicate_email(client, register):
    register("learner")
    response = client.post("/api/v1/auth/register", json={
        "email": "LEARNER@example.com",
        "password": PASSWORD,
        "role": "learner",
        "first_name": "B",
        "last_name": "C",
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "Email already registered"


def test_register_requires_role_fields(client):
    response = client.post("/api/v1/auth/register", json={
        "email": "emp@example.com",
        "password": PASSWORD,
        "role": "employer",
    })
    assert response.status_code == 400


def test_admin_cannot_self_register(client):
    response = client.post("/api/v1/auth/register", json={
        "email": "root@example.com",
        "password": PASSWORD,
        "role": "admin",
    })
    assert response.status_code == 403


def test_register_institution_links_tenant(client, institution, mongo_client):
    me = client.get("/api/v1/auth/me", headers=auth_header(institution["access_token"])).json()
    assert me["tenant_id"]
    assert me["profile"]["institution_name"] == "City Polytechnic"

    response = client.get(f"/api/v1/institutions/{me['tenant_id']}")
    assert response.status_code == 200
    assert response.json()["administrators"] == [me["_id"]]


def test_login_and_me(client, learner):
    response = client.post("/api/v1/auth/login", json={
        "email": "learner@example.com",
        "password": PASSWORD,
    })
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get("/api/v1/auth/me", headers=auth_header(token))
    assert me.status_code == 200
    body = me.json()
    assert body["email"] == "learner@example.com"
    assert body["profile"]["first_name"] == "Asha"
    assert "password_hash" not in body
    assert "refresh_token_hash" not in body


def test_login_wrong_password(client, learner):
    response = client.post("/api/v1/auth/login", json={
        "email": "learner@example.com",
        "password": "wrong-password",
    })
    assert response.status_code == 401


def test_me_without_token(client):
    assert client.get("/api/v1/auth/me").status_code == 401


def test_refresh_and_logout(client, learner):
    response = client.post("/api/v1/auth/refresh", json={"refresh_token": learner["refresh_token"]})
    assert response.status_code == 200
    assert response.json()["access_token"]

    # access tokens are not refresh tokens
    response = client.post("/api/v1/auth/refresh", json={"refresh_token": learner["access_token"]})
    assert response.status_code == 401

    logout = client.post("/api/v1/auth/logout", headers=auth_header(learner["access_token"]))
    assert logout.status_code == 200

    response = client.post("/api/v1/auth/refresh", json={"refresh_token": learner["refresh_token"]})
    assert response.status_code == 401


def test_role_restriction(client, learner, employer):
    response = client.get("/api/v1/employers/profile", headers=auth_header(learner["access_token"]))
    assert response.status_code == 403

    response = client.get("/api/v1/employers/profile", headers=auth_header(employer["access_token"]))
    assert response.status_code == 200


def test_deactivated_user_rejected(client, learner, admin):
    response = client.put(
        f"/api/v1/admin/users/{learner['user_id']}/status",
        json={"is_active": False},
        headers=auth_header(admin["access_token"]),
    )
    assert response.status_code == 200

    response = client.get("/api/v1/auth/me", headers=auth_header(learner["access_token"]))
    assert response.status_code == 403

    response = client.post("/api/v1/auth/login", json={
        "email": "learner@example.com",
        "password": PASSWORD,
    })
    assert response.status_code == 403
