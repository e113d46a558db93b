import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENABLE_SCHEDULER", "false")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "demo")
os.environ.setdefault("CLOUDINARY_API_KEY", "key")
os.environ.setdefault("CLOUDINARY_API_SECRET", "secret")

import cloudinary.uploader
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from workforce import cron_jobs, db
from workforce.main import app
from workforce.routers import (auth, users, employees, leaves, admin_leaves, manager_leaves,
                               attendance, invoices, machines, epf, work_queries, supervisors)
from workforce.utils import app_utils, employee_utils

PATCHED_MODULES = (
    db, app_utils, employee_utils, cron_jobs, auth, users, employees, leaves, admin_leaves,
    manager_leaves, attendance, invoices, machines, epf, work_queries, supervisors,
)


@pytest.fixture
def mock_db(monkeypatch):
    """Point every module-level ``*_collection`` handle at an in-memory database."""
    database = AsyncMongoMockClient()["workforce_test"]
    for module in PATCHED_MODULES:
        for name, value in list(vars(module).items()):
            if name.endswith("_collection"):
                monkeypatch.setattr(module, name, database[value.name])
    return database


@pytest.fixture
def login_as():
    def override(role="superadmin", **fields):
        user = {"_id": ObjectId(), "email": f"{role}@example.com", "role": role, "is_active": True, **fields}
        app.dependency_overrides[app_utils.get_current_user] = lambda: (user, role)
        return user

    yield override
    app.dependency_overrides.clear()


@pytest.fixture
def client(mock_db, login_as):
    login_as("superadmin", name="Super Admin")
    return TestClient(app)


@pytest.fixture
def anonymous_client(mock_db):
    return TestClient(app)


@pytest.fixture
def cloudinary_calls(monkeypatch):
    calls = {"upload": [], "destroy": []}

    def fake_upload(file, **options):
        content = file.read()
        public_id = f"{options['folder']}/{options.get('public_id', 'asset')}"
        calls["upload"].append({"public_id": public_id, **options})
        return {
            "secure_url": f"https://res.cloudinary.com/demo/{public_id}",
            "public_id": public_id,
            "format": "png",
            "bytes": len(content),
        }

    def fake_destroy(public_id, **options):
        calls["destroy"].append(public_id)
        return {"result": "ok"}

    monkeypatch.setattr(cloudinary.uploader, "upload", fake_upload)
    monkeypatch.setattr(cloudinary.uploader, "destroy", fake_destroy)
    return calls
