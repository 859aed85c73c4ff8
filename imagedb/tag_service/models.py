from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class TagCreate(BaseModel):
    name: str = Field(..., min_length=1)

class TagItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    name: Optional[str] = None
