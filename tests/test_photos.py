from listing_flow.services.photos import is_local_preview, normalize_photo_url, normalize_photo_urls, persistable_photos

BASE = "https://www.izimate.com"


def test_normalize_photo_url_rules():
    assert normalize_photo_url("blob:http://localhost/123", BASE) == "blob:http://localhost/123"
    assert normalize_photo_url("file:///tmp/a.jpg", BASE) == "file:///tmp/a.jpg"
    assert normalize_photo_url("https://cdn.example.com/a.jpg", BASE) == "https://cdn.example.com/a.jpg"
    assert normalize_photo_url("/storage/v1/object/public/a.jpg", BASE) == f"{BASE}/storage/v1/object/public/a.jpg"
    assert normalize_photo_url("a.jpg", BASE) == f"{BASE}/picture/a.jpg"
    assert normalize_photo_url("   ", BASE) is None


def test_normalize_photo_urls_drops_empty_and_non_text():
    assert normalize_photo_urls(["a.jpg", "", None, 3], BASE + "/") == [f"{BASE}/picture/a.jpg"]


def test_local_previews_are_not_persisted():
    photos = ["https://cdn.example.com/a.jpg", "blob:abc", "content://media/1", "FILE:///b.jpg"]
    assert is_local_preview("content://media/1")
    assert persistable_photos(photos) == ["https://cdn.example.com/a.jpg"]
