import io

import pytest

from pixshelf.api import create_app, parse_paging
from pixshelf.queries import Queries, connect, ensure_schema
from pixshelf.repository import ImageRepository
from pixshelf.service import ImageService

BASE_URL = "http://example.com"


def _service(tmp_path, max_file_size=10 * 1024 * 1024):
    conn = connect(":memory:")
    ensure_schema(conn)
    repo = ImageRepository(Queries(conn))
    return ImageService(repo, BASE_URL, tmp_path / "uploads", max_file_size)


@pytest.fixture
def service(tmp_path):
    return _service(tmp_path)


@pytest.fixture
def client(service):
    return create_app(service).test_client()


def _upload(client, name="cat", description="a cat", data=b"abc", filename="my cat.png"):
    return client.post(
        "/api/images",
        data={
            "name": name,
            "description": description,
            "image": (io.BytesIO(data), filename, "image/png"),
        },
        content_type="multipart/form-data",
    )


def _first_image(client):
    return client.get("/api/images").get_json()["images"][0]


@pytest.mark.parametrize(
    "args, expected",
    [
        ({}, (1, 20)),
        ({"page": "3", "page_size": "50"}, (3, 50)),
        ({"page": "0"}, (1, 20)),
        ({"page": "abc"}, (1, 20)),
        ({"page": "-2", "page_size": "101"}, (1, 20)),
        ({"page_size": " 5"}, (1, 20)),
        ({"page": "+2", "page_size": "100"}, (2, 100)),
    ],
)
def test_parse_paging(args, expected):
    assert parse_paging(args) == expected


def test_list_empty(client):
    response = client.get("/api/images")
    assert response.status_code == 200
    assert response.get_json() == {
        "images": [],
        "pagination": {"page": 1, "page_size": 20, "total": 0},
    }


def test_upload_then_list(client):
    response = _upload(client)
    assert response.status_code == 303
    assert response.headers["Location"].endswith("/")

    body = client.get("/api/images").get_json()
    assert body["pagination"]["total"] == 1
    image = body["images"][0]
    assert image["name"] == "cat"
    assert image["description"] == "a cat"
    assert image["mime_type"] == "image/png"
    assert image["size_bytes"] == 3
    assert image["public_url"].startswith(BASE_URL + "/public-images/")
    assert image["public_url"].endswith("_my_cat.png")
    assert image["url"].startswith(BASE_URL + "/static/images/")


def test_upload_requires_name(client):
    response = _upload(client, name="")
    assert response.status_code == 400
    assert response.get_json()["error"] == "bad_request"
    assert response.get_json()["message"] == "name is required"


def test_upload_requires_file(client):
    response = client.post("/api/images", data={"name": "cat"})
    assert response.status_code == 400
    assert response.get_json()["message"].startswith("image is required")


def test_upload_too_large_is_server_error(tmp_path):
    client = create_app(_service(tmp_path, max_file_size=2)).test_client()
    response = _upload(client, data=b"abc")
    assert response.status_code == 500
    assert response.get_json()["error"] == "internal_server_error"
    assert response.get_json()["message"] == "An unexpected error occurred"


def test_get_image(client):
    _upload(client)
    image = _first_image(client)
    response = client.get(f"/api/images/{image['id']}")
    assert response.status_code == 200
    assert response.get_json() == image


def test_get_invalid_id(client):
    response = client.get("/api/images/abc")
    assert response.status_code == 400
    assert response.get_json()["message"].startswith("invalid image ID")


def test_get_missing_image(client):
    response = client.get("/api/images/999")
    assert response.status_code == 404
    assert response.get_json() == {
        "error": "not_found",
        "message": "Image with ID 999 not found",
        "code": 404,
    }


def test_search_requires_query(client):
    response = client.get("/api/images/search")
    assert response.status_code == 400
    assert response.get_json()["message"] == "search query is required"


def test_search_matches_name_and_description(client):
    _upload(client, name="sunset", description="beach")
    _upload(client, name="dog", description="park")
    body = client.get("/api/images/search?q=beach").get_json()
    assert [img["name"] for img in body["images"]] == ["sunset"]
    assert body["pagination"]["total"] == 1


def test_update_image(client):
    _upload(client)
    image = _first_image(client)
    response = client.put(
        f"/api/images/{image['id']}", data={"name": "kitten", "description": "small"}
    )
    assert response.status_code == 200
    assert response.get_json()["name"] == "kitten"
    assert response.get_json()["description"] == "small"
    assert _first_image(client)["name"] == "kitten"


def test_update_requires_name(client):
    _upload(client)
    image = _first_image(client)
    response = client.put(f"/api/images/{image['id']}", data={"name": ""})
    assert response.status_code == 400
    assert response.get_json()["message"] == "name is required"


def test_update_missing_image(client):
    response = client.put("/api/images/999", data={"name": "x"})
    assert response.status_code == 404


def test_delete_image(client, service):
    _upload(client)
    image = _first_image(client)
    stored = list(service.upload_path.iterdir())
    assert len(stored) == 1

    response = client.delete(f"/api/images/{image['id']}")
    assert response.status_code == 204
    assert response.headers["HX-Redirect"] == "/"
    assert list(service.upload_path.iterdir()) == []
    assert client.get(f"/api/images/{image['id']}").status_code == 404


def test_delete_missing_image(client):
    assert client.delete("/api/images/999").status_code == 404


def test_public_image_served(client):
    _upload(client, data=b"pixels")
    image = _first_image(client)
    path = image["public_url"][len(BASE_URL):]
    response = client.get(path)
    assert response.status_code == 200
    assert response.data == b"pixels"


def test_public_image_missing(client, service):
    service.upload_path.mkdir(parents=True, exist_ok=True)
    assert client.get("/public-images/nothing.png").status_code == 404


def test_cors_preflight(client):
    response = client.open("/api/images", method="OPTIONS")
    assert response.status_code == 204
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert "DELETE" in response.headers["Access-Control-Allow-Methods"]


def test_cors_headers_on_normal_response(client):
    response = client.get("/api/images")
    assert response.headers["Access-Control-Allow-Headers"] == (
        "Content-Type, Authorization"
    )