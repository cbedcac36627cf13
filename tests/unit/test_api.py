from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from docintake.analysis.fallback import FALLBACK_SUMMARY
from docintake.api.app import create_app
from docintake.processor.controller import IntakeController
from docintake.processor.exceptions import DocumentNotFoundError, StorageError


@pytest.fixture()
def client(controller: IntakeController) -> TestClient:
    return TestClient(create_app(controller))


def _upload(
    client: TestClient,
    data: bytes = b"hello",
    *,
    filename: str = "notes.txt",
    content_type: str = "text/plain",
    owner_id: str = "user-1",
    document_type: str = "other",
):
    return client.post(
        "/documents",
        data={"owner_id": owner_id, "document_type": document_type},
        files={"file": (filename, data, content_type)},
    )


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestUpload:
    def test_upload_returns_processed_document(self, client: TestClient) -> None:
        response = _upload(client)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "processed"
        assert body["ownerId"] == "user-1"
        assert body["originalName"] == "notes.txt"
        assert body["byteSize"] == 5
        assert body["extractedText"] == "hello"
        assert body["analysis"]["summary"] == FALLBACK_SUMMARY
        assert body["processedAt"] is not None
        assert "storageRef" not in body

    def test_oversized_upload_is_413(self, client: TestClient) -> None:
        response = _upload(client, b"a" * 1025)

        assert response.status_code == 413
        assert response.json()["error"] == "payload_too_large"

    def test_disallowed_media_type_is_415(self, client: TestClient) -> None:
        response = _upload(client, b"PK\x03\x04", filename="a.zip", content_type="application/zip")

        assert response.status_code == 415
        assert response.json()["error"] == "unsupported_media_type"

    def test_missing_owner_is_400(self, client: TestClient) -> None:
        response = _upload(client, owner_id="")

        assert response.status_code == 400
        assert response.json() == {"error": "invalid_request", "message": "owner_id is required"}

    def test_missing_document_type_is_400(self, client: TestClient) -> None:
        response = _upload(client, document_type="")
        assert response.status_code == 400

    def test_storage_failure_is_500(self) -> None:
        controller = MagicMock(spec=IntakeController)
        controller.submit_stream.side_effect = StorageError("disk full")
        client = TestClient(create_app(controller))

        response = _upload(client)

        assert response.status_code == 500
        assert response.json() == {"error": "storage_error", "message": "Failed to store document"}

    def test_missing_file_is_400(self, client: TestClient) -> None:
        response = client.post(
            "/documents", data={"owner_id": "user-1", "document_type": "other"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "invalid_request", "message": "file is required"}

    def test_deleted_during_upload_is_404(self) -> None:
        controller = MagicMock(spec=IntakeController)
        controller.submit_stream.side_effect = DocumentNotFoundError("Document 7 not found")
        client = TestClient(create_app(controller))

        response = _upload(client)

        assert response.status_code == 404
        assert response.json() == {"error": "not_found", "message": "Document 7 not found"}


class TestDocumentRoutes:
    def test_list_by_owner(self, client: TestClient) -> None:
        first = _upload(client).json()
        _upload(client, owner_id="someone-else")

        response = client.get("/owners/user-1/documents")

        assert response.status_code == 200
        assert [doc["id"] for doc in response.json()] == [first["id"]]

    def test_list_for_unknown_owner_is_empty(self, client: TestClient) -> None:
        response = client.get("/owners/nobody/documents")
        assert response.status_code == 200
        assert response.json() == []

    def test_get_document(self, client: TestClient) -> None:
        created = _upload(client).json()

        response = client.get(f"/documents/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_get_unknown_document_is_404(self, client: TestClient) -> None:
        response = client.get("/documents/999")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_get_content(self, client: TestClient) -> None:
        created = _upload(client).json()

        response = client.get(f"/documents/{created['id']}/content")

        assert response.status_code == 200
        assert response.content == b"hello"
        assert response.headers["content-type"].startswith("text/plain")

    def test_content_for_unknown_document_is_404(self, client: TestClient) -> None:
        assert client.get("/documents/999/content").status_code == 404

    def test_delete_twice(self, client: TestClient) -> None:
        created = _upload(client).json()

        first = client.delete(f"/documents/{created['id']}")
        second = client.delete(f"/documents/{created['id']}")

        assert first.json() == {"deleted": True}
        assert second.json() == {"deleted": False}
        assert client.get(f"/documents/{created['id']}").status_code == 404
