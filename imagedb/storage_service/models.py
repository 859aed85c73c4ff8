from pydantic import BaseModel

class StoredFile(BaseModel):
    url: str
    filename: str
    size: int
