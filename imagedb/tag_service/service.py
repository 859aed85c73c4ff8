from typing import List, Optional
import logging
from pymongo.errors import PyMongoError

from imagedb.storage.mongo import MongoService
from imagedb.tag_service.models import TagCreate, TagItem
from imagedb.exceptions import DatabaseException

log = logging.getLogger(__name__)

def to_item(doc) -> TagItem:
    return TagItem(_id=str(doc["_id"]), name=doc.get("name"))

def fetch_tags(db: MongoService) -> List[TagItem]:
    """Lists every tag document."""
    try:
        docs = db.list_tags()
    except PyMongoError as e:
        log.error(f"MongoDB list_tags failed: {e}")
        raise DatabaseException(f"Failed to fetch tags: {e}")
    return [to_item(doc) for doc in docs]

def add_tag(db: MongoService, tag: TagCreate) -> TagItem:
    """Inserts a tag document. Duplicate names are allowed."""
    document = {"name": tag.name.strip()}
    try:
        inserted_id = db.insert_tag(document)
    except PyMongoError as e:
        log.error(f"MongoDB insert_tag failed: {e}")
        raise DatabaseException(f"Failed to save tag: {e}")
    log.info("Mongo Insert Tag - name=%s", document["name"])
    return TagItem(_id=str(inserted_id), name=document["name"])

def remove_tag(db: MongoService, name: Optional[str]) -> bool:
    """Tag removal is not supported; the tags and images collections are left untouched."""
    log.info("Tag delete requested for %r; no changes made", name)
    return False
