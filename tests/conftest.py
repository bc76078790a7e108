import pytest
from fastapi.testclient import TestClient

from main import create_app


@pytest.fixture
def users_file(tmp_path):
    return tmp_path / "users.json"


@pytest.fixture
def app(users_file):
    # Lowest bcrypt cost passlib accepts keeps the auth tests fast
    return create_app(users_file=users_file, bcrypt_rounds=4)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def sample_task():
    return {
        "title": "Sample Task",
        "description": "This is a sample task description.",
        "dueDate": "2024-03-15",
        "assignedTo": "alice",
        "category": "Work",
    }
