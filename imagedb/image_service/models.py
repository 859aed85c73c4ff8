from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from uuid import uuid4

def new_image_id() -> str:
    """Generates a new unique image ID."""
    return str(uuid4())

class ImageDocument(BaseModel):
    """Image metadata as sent by clients; unknown fields are kept.

    Only `_id` names the document key. The known fields are typed: title,
    description and url are strings, tags a list of strings.
    """
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = Field(None, alias="_id")
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    tags: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_mongo(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)

class ImageKey(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = Field(None, alias="_id")

class InsertedImage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")

class PageCount(BaseModel):
    pages: int
