from fastapi import APIRouter, Depends, Query
from typing import Optional

from imagedb.storage.mongo import MongoService
from imagedb.dependencies.dependencies import get_mongo_service, require_user
from imagedb.tag_service.service import add_tag, fetch_tags, remove_tag
from imagedb.tag_service.models import TagCreate
from imagedb.models import Envelope, ok

router = APIRouter(
    prefix="/tags",
    tags=["tags"],
    dependencies=[Depends(require_user)],
)

@router.get("", response_model=Envelope)
def read_tags(db: MongoService = Depends(get_mongo_service)):
    return ok([t.model_dump(by_alias=True) for t in fetch_tags(db)])

@router.post("", response_model=Envelope)
def insert_tag(tag: TagCreate, db: MongoService = Depends(get_mongo_service)):
    return ok(add_tag(db, tag).model_dump(by_alias=True), msg="Created")

@router.delete("", response_model=Envelope)
def delete_tag(
    name: Optional[str] = Query(None),
    db: MongoService = Depends(get_mongo_service),
):
    """Accepted but not applied: tags are never removed or scrubbed from images."""
    remove_tag(db, name)
    return ok(msg="Tag deletion is not supported; nothing was changed.")
