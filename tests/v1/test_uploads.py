# mypy: ignore-errors
"""Tests for the image upload endpoint."""

from fastapi import status

from gyansetu.core.settings import settings


def test_upload_png(client, auth_token, student, blob_store) -> None:
    response = client.post(
        "/api/v1/uploads/images",
        files={"file": ("diagram.png", b"\x89PNG\r\n\x1a\nfake", "image/png")},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["path"].startswith(f"{student.id}/")
    assert data["path"].endswith(".png")
    assert data["url"] == f"/media/{data['path']}"
    assert (blob_store.root / data["path"]).read_bytes().startswith(b"\x89PNG")


def test_uploaded_image_is_served(client, auth_token) -> None:
    payload = b"\x89PNG\r\n\x1a\nserved"
    uploaded = client.post(
        "/api/v1/uploads/images",
        files={"file": ("graph.png", payload, "image/png")},
        headers=auth_token,
    ).json()

    response = client.get(uploaded["url"])
    assert response.status_code == status.HTTP_200_OK
    assert response.content == payload
    assert response.headers["content-type"] == "image/png"


def test_missing_media_is_not_found(client) -> None:
    response = client.get("/media/1/nothing-here.png")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "Image not found", "status": 404}


def test_upload_rejects_other_types(client, auth_token) -> None:
    response = client.post(
        "/api/v1/uploads/images",
        files={"file": ("notes.pdf", b"%PDF-1.7", "application/pdf")},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "images can be uploaded" in response.json()["error"]


def test_upload_rejects_empty_file(client, auth_token) -> None:
    response = client.post(
        "/api/v1/uploads/images",
        files={"file": ("empty.gif", b"", "image/gif")},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_upload_size_limit(client, auth_token, monkeypatch) -> None:
    monkeypatch.setattr(settings, "max_upload_bytes", 1024 * 1024)
    response = client.post(
        "/api/v1/uploads/images",
        files={"file": ("big.jpg", b"x" * (1024 * 1024 + 1), "image/jpeg")},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Image exceeds the 1 MB upload limit"


def test_upload_requires_login(client) -> None:
    response = client.post(
        "/api/v1/uploads/images", files={"file": ("a.png", b"data", "image/png")}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
