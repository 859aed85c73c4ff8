from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging
import math
import re
from pymongo.errors import DuplicateKeyError, PyMongoError

from imagedb.storage.mongo import MongoService
from imagedb.image_service.models import ImageDocument, new_image_id
from imagedb.exceptions import (
    BadRequestException,
    DatabaseException,
    ImageConflictException,
    ImageNotFoundException,
)

log = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 15
DEFAULT_PAGE_NUM = 1

def parse_tags(raw: Optional[List[str]]) -> List[str]:
    """Flattens repeated and comma separated tag parameters, dropping blanks."""
    if not raw:
        return []
    return [t.strip() for value in raw for t in value.split(",") if t.strip()]

def build_image_filter(search: Optional[str] = None, tags: Optional[List[str]] = None) -> Dict[str, Any]:
    """Builds the MongoDB filter shared by the list and page-count endpoints.

    Tags are ANDed together; the search text is a case-insensitive literal
    substring match against title or description.
    """
    clauses = []
    if tags:
        clauses.append({"tags": {"$all": list(tags)}})
    if search:
        pattern = re.escape(search)
        clauses.append({"$or": [
            {"title": {"$regex": pattern, "$options": "i"}},
            {"description": {"$regex": pattern, "$options": "i"}},
        ]})
    if not clauses:
        return {}
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}

def page_window(page_size: int, page_num: int):
    """Returns (skip, limit) for a 1-based page number."""
    return page_size * (page_num - 1), page_size

def page_count(total: int, page_size: int) -> int:
    return math.ceil(total / page_size)

def get_image(db: MongoService, image_id: str) -> Dict[str, Any]:
    """Gets a single image document."""
    try:
        item = db.get_image(image_id)
    except PyMongoError as e:
        log.error(f"MongoDB get_image failed: {e}")
        raise DatabaseException(f"Failed to get image: {e}")
    if item is None:
        raise ImageNotFoundException(image_id)
    log.info("Mongo Get Image - _id=%s", image_id)
    return item

def list_images(
    db: MongoService,
    page_size: int = DEFAULT_PAGE_SIZE,
    page_num: int = DEFAULT_PAGE_NUM,
    search: Optional[str] = None,
    tags: Optional[List[str]] = None,
) -> List[Dict[str, Any]]:
    """Fetches one page of images matching the search text and tags."""
    skip, limit = page_window(page_size, page_num)
    try:
        return db.find_images(build_image_filter(search, tags), skip=skip, limit=limit)
    except PyMongoError as e:
        log.error(f"MongoDB list_images failed: {e}")
        raise DatabaseException(f"Failed to fetch images: {e}")

def count_pages(
    db: MongoService,
    page_size: int = DEFAULT_PAGE_SIZE,
    search: Optional[str] = None,
    tags: Optional[List[str]] = None,
) -> int:
    try:
        total = db.count_images(build_image_filter(search, tags))
    except PyMongoError as e:
        log.error(f"MongoDB count_images failed: {e}")
        raise DatabaseException(f"Failed to count images: {e}")
    return page_count(total, page_size)

def create_image(db: MongoService, image: ImageDocument) -> str:
    """Inserts a new image document, generating its ID when absent."""
    now = datetime.now(timezone.utc)
    document = image.to_mongo()
    document.setdefault("_id", new_image_id())
    document.setdefault("created_at", now)
    document["updated_at"] = now
    try:
        inserted_id = db.insert_image(document)
    except DuplicateKeyError:
        raise ImageConflictException(document["_id"])
    except PyMongoError as e:
        log.error(f"MongoDB insert_image failed: {e}")
        raise DatabaseException(f"Failed to save image: {e}")
    log.info("Mongo Insert Image - _id=%s", inserted_id)
    return inserted_id

def update_image(db: MongoService, image: ImageDocument) -> str:
    """Replaces the stored document that has the same ID, keeping its creation time."""
    if not image.id:
        raise BadRequestException("Field '_id' is required.")
    document = image.to_mongo()
    document["updated_at"] = datetime.now(timezone.utc)
    try:
        stored = db.get_image(image.id)
        if stored is None:
            raise ImageNotFoundException(image.id)
        if stored.get("created_at") is not None:
            document["created_at"] = stored["created_at"]
        matched = db.replace_image(image.id, document)
    except PyMongoError as e:
        log.error(f"MongoDB replace_image failed: {e}")
        raise DatabaseException(f"Failed to update image: {e}")
    if matched == 0:
        raise ImageNotFoundException(image.id)
    log.info("Mongo Update Image - _id=%s", image.id)
    return image.id

def remove_image(db: MongoService, image_id: str) -> bool:
    """Removes an image document; the stored file is left in place."""
    try:
        deleted = db.delete_image(image_id)
    except PyMongoError as e:
        log.error(f"MongoDB delete_image failed: {e}")
        raise DatabaseException(f"Failed to delete image: {e}")
    if deleted == 0:
        raise ImageNotFoundException(image_id)
    log.info("Mongo Delete Image - _id=%s", image_id)
    return True
