from typing import Optional
from pydantic import BaseModel

class LoginRequest(BaseModel):
    email: str
    password: str

class Identity(BaseModel):
    email: str
    name: Optional[str] = None

class TokenResponse(BaseModel):
    token: str
