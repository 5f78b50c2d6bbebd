from datetime import datetime, timezone

from pixshelf.models import (
    Image,
    ImageData,
    PageView,
    Pagination,
    PublicImage,
    SearchParams,
)

BASE = "http://localhost:8080"


def _image():
    stamp = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    return Image(
        id=3,
        name="Cat",
        description="a cat",
        file_path="123_cat.png",
        mime_type="image/png",
        size_bytes=2048,
        created_at=stamp,
        updated_at=stamp,
    )


def test_image_url_uses_static_tree():
    assert _image().image_url(BASE) == BASE + "/static/images/123_cat.png"


def test_public_image_url():
    assert _image().public_image_url(BASE) == BASE + "/public-images/123_cat.png"


def test_public_image_from_image_copies_fields():
    img = _image()
    pub = PublicImage.from_image(img, BASE)
    assert pub.id == img.id
    assert pub.name == img.name
    assert pub.description == img.description
    assert pub.url == img.image_url(BASE)
    assert pub.public_url == img.public_image_url(BASE)
    assert pub.size_bytes == img.size_bytes
    assert pub.created_at == img.created_at


def test_public_image_to_dict_keys_and_times():
    pub = PublicImage.from_image(_image(), BASE)
    data = pub.to_dict()
    assert set(data) == {
        "id", "name", "description", "url", "public_url",
        "mime_type", "size_bytes", "created_at", "updated_at",
    }
    assert datetime.fromisoformat(data["created_at"]) == pub.created_at
    assert data["mime_type"] == "image/png"


def test_pagination_to_dict():
    assert Pagination(page=2, page_size=20, total=45).to_dict() == {
        "page": 2, "page_size": 20, "total": 45,
    }


def test_search_params_holds_pagination():
    p = Pagination(page=1, page_size=10)
    params = SearchParams(query="cat", pagination=p)
    assert params.pagination.total == 0
    assert params.query == "cat"


def test_image_data_from_public():
    pub = PublicImage.from_image(_image(), BASE)
    data = ImageData.from_public(pub)
    assert (data.id, data.name, data.url, data.public_url) == (
        pub.id, pub.name, pub.url, pub.public_url,
    )
    assert data.created_at == pub.created_at


def test_page_view_exact_pages():
    view = PageView.from_pagination(Pagination(page=2, page_size=20, total=40), "q")
    assert view.total_pages == 2
    assert view.has_prev is True
    assert view.has_next is False
    assert view.query == "q"


def test_page_view_first_page_with_more():
    view = PageView.from_pagination(Pagination(page=1, page_size=20, total=41))
    assert view.total_pages == 3
    assert view.has_prev is False
    assert view.has_next is True
    assert view.total_items == 41


def test_page_view_empty():
    view = PageView.from_pagination(Pagination(page=1, page_size=20, total=0))
    assert view.total_pages == 0
    assert view.has_next is False