"""Tests for the HTTP surface."""

import base64
import json

import pytest
from fastapi.testclient import TestClient

from filebrowser.app import create_app


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def as_user(user_id):
    return {"X-Uid": str(user_id)}


@pytest.fixture
def client(container):
    with TestClient(create_app(container=container)) as test_client:
        yield test_client


@pytest.fixture
def users(client):
    """Directories for users 1 and 2."""
    for user_id in (1, 2):
        assert client.post("/directory", headers=as_user(user_id)).status_code == 201
    return client


class TestCallerIdentity:
    """Test cases for the uid header."""

    def test_missing_header(self, client):
        """Test requests without caller id are unauthorized."""
        response = client.get("/directory")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "E004"

    @pytest.mark.parametrize("value", ["abc", "1.5", "4294967296", "1_000", "+5", "--1"])
    def test_invalid_header(self, client, value):
        """Test unparsable caller ids are rejected."""
        response = client.get("/directory", headers={"X-Uid": value})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "E007"

    def test_zero_is_not_a_user(self, client):
        """Test the reserved id 0 is unauthorized."""
        response = client.get("/directory", headers={"X-Uid": "0"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "E004"


class TestDirectoryEndpoints:
    """Test cases for directory endpoints."""

    def test_create_twice(self, users):
        """Test a second directory conflicts."""
        response = users.post("/directory", headers=as_user(1))

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "E010"

    def test_listing_and_search(self, users):
        """Test listing a level and searching by path."""
        for path in ("notes.txt", "docs/Report.pdf", "docs/old/report.txt"):
            assert users.post("/files", json={"path": path}, headers=as_user(1)).status_code == 201

        listing = users.get("/directory", params={"path": "/"}, headers=as_user(1)).json()["files"]
        assert set(listing) == {"notes.txt", "docs"}
        assert listing["docs"]["flags"] & 0x02
        assert listing["docs"]["id"] == ""

        found = users.get("/directory/search", params={"pattern": "REPORT"}, headers=as_user(1)).json()
        assert set(found["files"]) == {"docs/Report.pdf", "docs/old/report.txt"}
        assert found["matches"]["docs/Report.pdf"] == {"start": 6, "end": 12}

        by_directory = users.get("/directory/search", params={"pattern": "^/docs/o"}, headers=as_user(1)).json()
        assert set(by_directory["files"]) == {"docs/old"}
        assert by_directory["files"]["docs/old"]["flags"] & 0x02
        assert by_directory["matches"]["docs/old"] == {"start": 0, "end": 7}

    def test_invalid_search_pattern(self, users):
        """Test an invalid pattern is a bad request."""
        response = users.get("/directory/search", params={"pattern": "("}, headers=as_user(1))

        assert response.status_code == 400

    def test_listing_without_directory(self, client):
        """Test listing before the directory exists."""
        assert client.get("/directory", headers=as_user(5)).status_code == 404


class TestFileEndpoints:
    """Test cases for file endpoints."""

    def test_file_lifecycle(self, users):
        """Test create, retrieve, share, update and delete."""
        created = users.post(
            "/files",
            json={"path": "docs/a.txt", "data": b64(b"hello"), "metadata": [{"key": "app", "value": "notes"}]},
            headers=as_user(1),
        )
        assert created.status_code == 201
        file_id = created.json()["id"]

        by_path = users.get("/files/docs/a.txt", headers=as_user(1)).json()
        assert by_path["id"] == file_id
        assert base64.b64decode(by_path["data"]) == b"hello"
        assert {"key": "app", "value": "notes"} in by_path["metadata"]

        assert users.get(f"/files/{file_id}", headers=as_user(2)).status_code == 401

        granted = users.post(
            f"/files/{file_id}/permissions",
            json={"uid": 2, "permissions": {"read": True, "write": True}},
            headers=as_user(1),
        )
        assert granted.status_code == 200

        updated = users.put(f"/files/{file_id}", json={"data": b64(b"bye")}, headers=as_user(2)).json()
        assert updated["flags"] & 0x01
        assert base64.b64decode(updated["data"]) == b"bye"

        assert users.delete(f"/files/{file_id}", headers=as_user(2)).status_code == 401

        revoked = users.delete(f"/files/{file_id}/permissions/2", headers=as_user(1)).json()
        assert [entry["uid"] for entry in revoked["permissions"]] == [1]

        assert users.delete("/files/docs/a.txt", headers=as_user(1)).status_code == 200
        assert users.get(f"/files/{file_id}", headers=as_user(1)).status_code == 404

    def test_invalid_data(self, users):
        """Test payloads must be base64."""
        response = users.post("/files", json={"path": "a", "data": "***"}, headers=as_user(1))

        assert response.status_code == 400

    def test_invalid_name(self, users):
        """Test the root path is not a file name."""
        response = users.post("/files", json={"path": "/"}, headers=as_user(1))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "E011"

    def test_last_owner(self, users):
        """Test the last owner cannot revoke itself."""
        file_id = users.post("/files", json={"path": "a"}, headers=as_user(1)).json()["id"]

        response = users.delete(f"/files/{file_id}/permissions/1", headers=as_user(1))

        assert response.status_code == 403


class TestCertificateAndProfileEndpoints:
    """Test cases for certificates and profiles."""

    def test_certificate(self, users, container):
        """Test a reader receives a token carrying its permissions."""
        file_id = users.post("/files", json={"path": "a"}, headers=as_user(1)).json()["id"]

        body = users.get(f"/certificates/{file_id}", headers=as_user(1)).json()

        assert body["permissions"] == {"read": True, "write": True, "owner": True}
        parsed = container.engine.parse(body["token"])
        assert (parsed.user_id, parsed.file_id, parsed.id) == (1, file_id, body["id"])
        assert users.get(f"/certificates/{file_id}", headers=as_user(2)).status_code == 401

    def test_profile(self, users):
        """Test the profile is read from the profile file."""
        profile = {"name": "Ada", "email": "ada@example.com"}
        users.post("/files", json={"path": ".profile", "data": b64(json.dumps(profile).encode())}, headers=as_user(1))

        assert users.get("/profile", headers=as_user(1)).json() == profile
        assert users.get("/profile", headers=as_user(2)).status_code == 404
