from __future__ import annotations


def test_register_patient_is_unverified(client, storage):
    resp = client.post("/api/register", json={
        "name": "Pat",
        "email": "pat@example.com",
        "password": "secret123",
        "role": "patient",
        "verified": True,
    })

    assert resp.status_code == 201
    user = storage.get_user(resp.get_json()["userId"])
    assert user["verified"] is False
    assert user["password"] != "secret123"


def test_register_admin_is_verified(client, storage):
    resp = client.post("/api/register", json={
        "name": "Root",
        "email": "root@example.com",
        "password": "secret123",
        "role": "admin",
    })

    assert storage.get_user(resp.get_json()["userId"])["verified"] is True


def test_register_rejects_existing_email(client, make_user):
    user = make_user("patient")

    resp = client.post("/api/register", json={
        "name": "Again",
        "email": user["email"],
        "password": "secret123",
        "role": "patient",
    })

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "User already exists with this email"


def test_register_validates_payload(client):
    resp = client.post("/api/register", json={
        "name": "",
        "email": "not-an-email",
        "password": "123",
        "role": "nurse",
    })

    assert resp.status_code == 400
    errors = resp.get_json()["error"]
    assert set(errors) == {"name", "email", "password", "role"}


def test_unverified_account_cannot_log_in(client, make_user):
    user = make_user("doctor", verified=False)

    resp = client.post("/api/login", json={
        "email": user["email"], "password": user["password"], "role": "doctor",
    })

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Account pending verification"


def test_wrong_password_and_wrong_role_look_the_same(client, make_user):
    user = make_user("patient")

    wrong_password = client.post("/api/login", json={
        "email": user["email"], "password": "nope-nope", "role": "patient",
    })
    wrong_role = client.post("/api/login", json={
        "email": user["email"], "password": user["password"], "role": "doctor",
    })
    unknown = client.post("/api/login", json={
        "email": "ghost@example.com", "password": "whatever", "role": "patient",
    })

    for resp in (wrong_password, wrong_role, unknown):
        assert resp.status_code == 401
        assert resp.get_json() == {"message": "Invalid credentials"}


def test_login_sets_session_snapshot(make_user, login):
    user = make_user("patient", name="Pat")
    c = login(user)

    me = c.get("/api/me").get_json()["user"]
    assert me == {
        "_id": user["id"],
        "email": user["email"],
        "role": "patient",
        "name": "Pat",
        "verified": True,
    }


def test_me_requires_session(client):
    resp = client.get("/api/me")

    assert resp.status_code == 401
    assert resp.get_json() == {"message": "Authentication required"}


def test_logout_clears_session(make_user, login):
    c = login(make_user("patient"))

    assert c.post("/api/logout").status_code == 200
    assert c.get("/api/me").status_code == 401


def test_snapshot_is_not_refreshed_until_relogin(make_user, login, storage):
    user = make_user("doctor")
    c = login(user)

    storage.update_user_verification(user["id"], False)

    assert c.get("/api/me").get_json()["user"]["verified"] is True


def test_unknown_route_renders_json(client):
    resp = client.get("/api/nowhere")

    assert resp.status_code == 404
    assert "message" in resp.get_json()


def test_register_rejects_non_object_body(client):
    resp = client.post("/api/register", json=["pat@example.com"])

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Registration failed"


def test_malformed_email_is_just_an_unknown_user(client):
    resp = client.post("/api/login", json={
        "email": "not-an-email", "password": "secret123", "role": "patient",
    })

    assert resp.status_code == 401
    assert resp.get_json() == {"message": "Invalid credentials"}
