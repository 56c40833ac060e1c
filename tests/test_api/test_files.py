"""
Tests for file endpoints.
"""

import io

import pytest
from httpx import AsyncClient

from filevault.config import get_settings
from filevault.main import app


def _upload(name: str, content: bytes, content_type: str = "text/plain") -> dict:
    return {"file": (name, io.BytesIO(content), content_type)}


@pytest.mark.asyncio
async def test_list_files_empty(client: AsyncClient):
    """Test listing files when nothing has been uploaded."""
    response = await client.get("/api/files")

    assert response.status_code == 200
    assert response.json() == {"storageType": "local", "files": []}


@pytest.mark.asyncio
async def test_upload_download_delete(client: AsyncClient, sample_file_content: bytes):
    """Upload a 10-byte a.txt, fetch it back, delete it, then fail to fetch it."""
    response = await client.post("/api/upload", files=_upload("a.txt", sample_file_content))

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Uploaded (local)"
    descriptor = body["file"]
    file_id = descriptor["id"]
    assert descriptor["originalname"] == "a.txt"
    assert descriptor["mimetype"] == "text/plain"
    assert descriptor["size"] == 10
    assert descriptor["url"] == f"http://test/api/files/{file_id}"

    download = await client.get(f"/api/files/{file_id}")
    assert download.status_code == 200
    assert download.content == sample_file_content
    assert download.headers["content-type"].startswith("text/plain")
    assert download.headers["content-disposition"] == 'attachment; filename="a.txt"'

    deleted = await client.delete(f"/api/files/{file_id}")
    assert deleted.status_code == 200
    assert deleted.json() == {"message": "Deleted (local)", "id": file_id}

    missing = await client.get(f"/api/files/{file_id}")
    assert missing.status_code == 404
    assert missing.json()["error"] == "not_found"


@pytest.mark.asyncio
async def test_delete_twice_returns_404(client: AsyncClient, sample_file_content: bytes):
    response = await client.post("/api/upload", files=_upload("a.txt", sample_file_content))
    file_id = response.json()["file"]["id"]

    first = await client.delete(f"/api/files/{file_id}")
    second = await client.delete(f"/api/files/{file_id}")

    assert first.status_code == 200
    assert second.status_code == 404
    assert second.json()["error"] == "not_found"


@pytest.mark.asyncio
async def test_upload_without_file_field(client: AsyncClient):
    """A multipart body without a "file" field is a 400, not a 422."""
    response = await client.post("/api/upload", files={"document": ("a.txt", io.BytesIO(b"x"), "text/plain")})

    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "validation_failed"
    assert "file" in data["message"]


@pytest.mark.asyncio
async def test_upload_with_text_in_file_field(client: AsyncClient):
    """A plain form value under "file" gets the structured 400 payload."""
    response = await client.post("/api/upload", data={"file": "not a file"})

    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "validation_failed"
    assert "file" in data["message"]
    assert data["details"]["errors"][0]["loc"] == ["body", "file"]
    assert "detail" not in data


@pytest.mark.asyncio
async def test_upload_size_limit(client: AsyncClient, test_settings):
    """Exactly the limit is accepted, one byte more is rejected."""
    app.dependency_overrides[get_settings] = lambda: test_settings.model_copy(
        update={"MAX_FILE_SIZE_BYTES": 16}
    )

    at_limit = await client.post("/api/upload", files=_upload("ok.bin", b"x" * 16))
    over_limit = await client.post("/api/upload", files=_upload("big.bin", b"x" * 17))

    assert at_limit.status_code == 200
    assert at_limit.json()["file"]["size"] == 16
    assert over_limit.status_code == 400
    assert over_limit.json()["error"] == "file_too_large"

    listing = (await client.get("/api/files")).json()
    assert [f["originalname"] for f in listing["files"]] == ["ok.bin"]


@pytest.mark.asyncio
async def test_list_files_newest_first(client: AsyncClient):
    for name in ("first.txt", "second.txt", "third.txt"):
        await client.post("/api/upload", files=_upload(name, name.encode()))

    response = await client.get("/api/files")

    assert response.status_code == 200
    data = response.json()
    assert data["storageType"] == "local"
    files = data["files"]
    assert len(files) == 3
    dates = [f["uploadDate"] for f in files]
    assert dates == sorted(dates, reverse=True)
    assert set(files[0]) == {"id", "originalname", "filename", "mimetype", "size", "uploadDate", "url"}
    assert all(f["filename"].endswith(f["originalname"]) for f in files)


@pytest.mark.asyncio
async def test_download_unknown_id(client: AsyncClient):
    response = await client.get("/api/files/non-existent-id")

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


@pytest.mark.asyncio
async def test_download_with_bytes_missing(client: AsyncClient, local_storage, sample_file_content: bytes):
    response = await client.post("/api/upload", files=_upload("a.txt", sample_file_content))
    file_id = response.json()["file"]["id"]
    for path in local_storage.base_path.iterdir():
        path.unlink()

    download = await client.get(f"/api/files/{file_id}")

    assert download.status_code == 404
    assert download.json()["error"] == "not_found"


@pytest.mark.asyncio
async def test_non_ascii_filename(client: AsyncClient):
    response = await client.post("/api/upload", files=_upload("résumé.pdf", b"%PDF-1.4", "application/pdf"))
    file_id = response.json()["file"]["id"]

    download = await client.get(f"/api/files/{file_id}")

    assert download.status_code == 200
    disposition = download.headers["content-disposition"]
    assert disposition.startswith("attachment;")
    assert "filename*=UTF-8''r%C3%A9sum%C3%A9.pdf" in disposition


@pytest.mark.asyncio
async def test_chunked_upload_spanning_chunks(chunked_client: AsyncClient):
    """Content larger than one chunk comes back whole and in order."""
    content = bytes(range(50)) * 3

    response = await chunked_client.post(
        "/api/upload",
        files=_upload("data.bin", content, "application/octet-stream"),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Uploaded (chunked)"
    assert body["file"]["size"] == len(content)

    download = await chunked_client.get(f"/api/files/{body['file']['id']}")
    assert download.status_code == 200
    assert download.content == content
    assert download.headers["content-type"] == "application/octet-stream"


@pytest.mark.asyncio
async def test_chunked_listing_shape(chunked_client: AsyncClient, sample_file_content: bytes):
    await chunked_client.post("/api/upload", files=_upload("a.txt", sample_file_content))

    data = (await chunked_client.get("/api/files")).json()

    assert data["storageType"] == "chunked"
    [item] = data["files"]
    assert item["filename"] == "a.txt"
    assert item["contentType"] == "text/plain"
    assert item["length"] == 10
    assert set(item) == {"id", "filename", "contentType", "length", "uploadDate", "url"}


@pytest.mark.asyncio
async def test_chunked_delete(chunked_client: AsyncClient, sample_file_content: bytes):
    response = await chunked_client.post("/api/upload", files=_upload("a.txt", sample_file_content))
    file_id = response.json()["file"]["id"]

    deleted = await chunked_client.delete(f"/api/files/{file_id}")

    assert deleted.status_code == 200
    assert deleted.json() == {"message": "Deleted (chunked)", "id": file_id}
    assert (await chunked_client.get(f"/api/files/{file_id}")).status_code == 404
