"""
Shared fixtures: an app backed by mongomock and helpers to create and log in users.
"""

from __future__ import annotations

import io
import uuid

import mongomock
import pytest

from curacloud.app import create_app
from curacloud.config import TestConfig


@pytest.fixture
def app(tmp_path):
    """Application wired to an in-memory Mongo and a temporary upload folder."""
    app = create_app(TestConfig, mongo_client=mongomock.MongoClient())
    app.config["UPLOAD_FOLDER"] = str(tmp_path / "uploads")
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def storage(app):
    return app.extensions["storage"]


@pytest.fixture
def make_user(app, storage):
    """Register a user through the API and, unless told otherwise, verify it."""

    def _make(role, *, email=None, password="secret123", verified=True, name=None, **extra):
        email = email or f"{role}-{uuid.uuid4().hex[:8]}@example.com"
        body = {
            "name": name or role.title(),
            "email": email,
            "password": password,
            "role": role,
            **extra,
        }
        resp = app.test_client().post("/api/register", json=body)
        assert resp.status_code == 201, resp.get_json()
        user_id = resp.get_json()["userId"]
        if verified and role != "admin":
            storage.update_user_verification(user_id, True)
        return {"id": user_id, "email": email, "password": password, "role": role}

    return _make


@pytest.fixture
def login(app):
    """Return a test client holding a session for the given user."""

    def _login(user):
        c = app.test_client()
        resp = c.post(
            "/api/login",
            json={"email": user["email"], "password": user["password"], "role": user["role"]},
        )
        assert resp.status_code == 200, resp.get_json()
        return c

    return _login


@pytest.fixture
def pdf_upload():
    def _build(content=b"%PDF-1.4 lab results", filename="labs.pdf", mimetype="application/pdf",
               description="Blood work"):
        return {
            "file": (io.BytesIO(content), filename, mimetype),
            "description": description,
        }

    return _build
