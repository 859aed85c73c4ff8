from fastapi import APIRouter, Body, Depends, Query
from typing import List, Optional

from imagedb.storage.mongo import MongoService
from imagedb.dependencies.dependencies import get_mongo_service, require_user
from imagedb.image_service.service import (
    DEFAULT_PAGE_NUM,
    DEFAULT_PAGE_SIZE,
    count_pages,
    create_image,
    get_image,
    list_images,
    parse_tags,
    remove_image,
    update_image,
)
from imagedb.image_service.models import ImageDocument, ImageKey, InsertedImage, PageCount
from imagedb.exceptions import BadRequestException
from imagedb.models import Envelope, ok

router = APIRouter(
    prefix="/image/db",
    tags=["images"],
    dependencies=[Depends(require_user)],
)

@router.get("", response_model=Envelope)
def read_images(
    id: Optional[str] = Query(None),
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="pageSize", ge=1),
    page_num: int = Query(DEFAULT_PAGE_NUM, alias="pageNum", ge=1),
    search: Optional[str] = Query(None),
    tags: Optional[List[str]] = Query(None),
    db: MongoService = Depends(get_mongo_service),
):
    """Gets one image by `id`, or a filtered page of images."""
    if id is not None:
        return ok(get_image(db, id))
    items = list_images(
        db,
        page_size=page_size,
        page_num=page_num,
        search=search,
        tags=parse_tags(tags),
    )
    return ok(items)

@router.get("/pages", response_model=Envelope)
def read_page_count(
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="pageSize", ge=1),
    search: Optional[str] = Query(None),
    tags: Optional[List[str]] = Query(None),
    db: MongoService = Depends(get_mongo_service),
):
    """Number of pages the list endpoint yields for the same filter."""
    pages = count_pages(db, page_size=page_size, search=search, tags=parse_tags(tags))
    return ok(PageCount(pages=pages).model_dump())

@router.post("", response_model=Envelope)
def insert_image(
    image: ImageDocument,
    db: MongoService = Depends(get_mongo_service),
):
    inserted_id = create_image(db, image)
    return ok(InsertedImage(_id=inserted_id).model_dump(by_alias=True), msg="Created")

@router.put("", response_model=Envelope)
def replace_image(
    image: ImageDocument,
    db: MongoService = Depends(get_mongo_service),
):
    image_id = update_image(db, image)
    return ok(InsertedImage(_id=image_id).model_dump(by_alias=True), msg="Updated")

@router.delete("", response_model=Envelope)
def delete_image(
    id: Optional[str] = Query(None),
    key: Optional[ImageKey] = Body(None),
    db: MongoService = Depends(get_mongo_service),
):
    """Deletes an image document by `id` query parameter or `_id` in the body."""
    image_id = id or (key.id if key else None)
    if not image_id:
        raise BadRequestException("An image id is required.")
    remove_image(db, image_id)
    return ok(msg="Deleted")
