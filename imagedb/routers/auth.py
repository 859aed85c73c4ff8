from fastapi import APIRouter, Depends

from imagedb.storage.mongo import MongoService
from imagedb.dependencies.dependencies import get_current_user, get_mongo_service
from imagedb.auth_service.service import authenticate, create_token
from imagedb.auth_service.models import Identity, LoginRequest, TokenResponse
from imagedb.models import Envelope, ok

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)

@router.post("/login", response_model=Envelope)
def login(credentials: LoginRequest, db: MongoService = Depends(get_mongo_service)):
    """Exchanges email and password for a signed session token."""
    token = authenticate(db, credentials)
    return ok(TokenResponse(token=token).model_dump())

@router.get("/session", response_model=Envelope)
def refresh_session(user: Identity = Depends(get_current_user)):
    """Reissues a fresh token for the identity in the presented one."""
    return ok(TokenResponse(token=create_token(user)).model_dump())
