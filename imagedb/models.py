from typing import Any, Optional
from pydantic import BaseModel

class Envelope(BaseModel):
    """Body shape shared by every JSON response."""
    status: int
    msg: Optional[str] = None
    data: Optional[Any] = None

def ok(data: Any = None, msg: str = "OK") -> Envelope:
    return Envelope(status=200, msg=msg, data=data)
