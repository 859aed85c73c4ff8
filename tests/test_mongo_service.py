import pytest
from pymongo.errors import DuplicateKeyError

from imagedb.settings import settings
from imagedb.storage.mongo import MongoService


def test_image_crud(mongo_service):
    assert mongo_service.insert_image({"_id": "a", "title": "A"}) == "a"
    assert mongo_service.get_image("a")["title"] == "A"

    assert mongo_service.replace_image("a", {"title": "B"}) == 1
    assert mongo_service.get_image("a") == {"_id": "a", "title": "B"}
    assert mongo_service.replace_image("missing", {"title": "B"}) == 0

    assert mongo_service.delete_image("a") == 1
    assert mongo_service.delete_image("a") == 0
    assert mongo_service.get_image("a") is None


def test_duplicate_image_id(mongo_service):
    mongo_service.insert_image({"_id": "a"})
    with pytest.raises(DuplicateKeyError):
        mongo_service.insert_image({"_id": "a"})


def test_find_and_count(mongo_service):
    for i in range(5):
        mongo_service.insert_image({"_id": str(i), "tags": ["even"] if i % 2 == 0 else []})
    assert mongo_service.count_images({"tags": {"$all": ["even"]}}) == 3
    assert [d["_id"] for d in mongo_service.find_images({}, skip=1, limit=2)] == ["1", "2"]


def test_user_email_unique(mongo_service):
    with pytest.raises(DuplicateKeyError):
        mongo_service.users.insert_one({"email": "admin@example.com", "name": "Twin"})


def test_upsert_user_is_idempotent(mongo_service):
    mongo_service.upsert_user("admin@example.com", "Renamed", "hash")
    assert mongo_service.users.count_documents({}) == 1
    assert mongo_service.find_user("admin@example.com")["name"] == "Renamed"


def test_tags(mongo_service):
    mongo_service.insert_tag({"name": "x"})
    mongo_service.insert_tag({"name": "x"})
    assert [t["name"] for t in mongo_service.list_tags()] == ["x", "x"]


def test_client_returns_aware_datetimes(mocker):
    client_cls = mocker.patch("imagedb.storage.mongo.MongoClient")
    MongoService()
    client_cls.assert_called_once_with(settings.mongo_url, tz_aware=True)
