from pymongo import MongoClient, ASCENDING
from pymongo.collection import Collection
from typing import Optional, Dict, Any, List
from imagedb.settings import settings
import logging

log = logging.getLogger(__name__)

# -------------------------
# MongoDB Service
# -------------------------
class MongoService:
    def __init__(self, client: Optional[MongoClient] = None):
        self.client = client if client is not None else MongoClient(settings.mongo_url, tz_aware=True)
        self.db = self.client[settings.mongo_database]
        self.images: Collection = self.db["images"]
        self.tags: Collection = self.db["tags"]
        self.users: Collection = self.db["users"]
        log.info("Initialized MongoDB client for database %s", settings.mongo_database)

        # Ensure indexes exist at initialization
        self.ensure_indexes()

    def ensure_indexes(self):
        self.users.create_index([("email", ASCENDING)], unique=True)
        log.debug("Ensured unique index on users.email")

    # images
    def get_image(self, image_id: str) -> Optional[Dict[str, Any]]:
        return self.images.find_one({"_id": image_id})

    def find_images(self, filter: Dict[str, Any], skip: int, limit: int) -> List[Dict[str, Any]]:
        return list(self.images.find(filter).skip(skip).limit(limit))

    def count_images(self, filter: Dict[str, Any]) -> int:
        return self.images.count_documents(filter)

    def insert_image(self, document: Dict[str, Any]) -> str:
        result = self.images.insert_one(document)
        log.debug("Inserted image %s", result.inserted_id)
        return result.inserted_id

    def replace_image(self, image_id: str, document: Dict[str, Any]) -> int:
        result = self.images.replace_one({"_id": image_id}, document)
        log.debug("Replaced image %s (matched=%d)", image_id, result.matched_count)
        return result.matched_count

    def delete_image(self, image_id: str) -> int:
        result = self.images.delete_one({"_id": image_id})
        log.debug("Deleted image %s (deleted=%d)", image_id, result.deleted_count)
        return result.deleted_count

    # tags
    def list_tags(self) -> List[Dict[str, Any]]:
        return list(self.tags.find())

    def insert_tag(self, document: Dict[str, Any]):
        result = self.tags.insert_one(document)
        log.debug("Inserted tag %s", document.get("name"))
        return result.inserted_id

    # users
    def find_user(self, email: str) -> Optional[Dict[str, Any]]:
        return self.users.find_one({"email": email})

    def upsert_user(self, email: str, name: str, password_hash: str):
        self.users.update_one(
            {"email": email},
            {"$set": {"name": name, "password": password_hash}},
            upsert=True,
        )
        log.info("Upserted user %s", email)

    def close(self):
        self.client.close()
        log.info("Closed MongoDB client")
