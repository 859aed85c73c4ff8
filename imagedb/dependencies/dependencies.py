from typing import Optional
from fastapi import Request
from imagedb.storage.mongo import MongoService
from imagedb.storage.disk import DiskStorageService
from imagedb.auth_service.models import Identity
from imagedb.auth_service.service import decode_token
from imagedb.exceptions import UnauthorizedException
from imagedb.settings import settings

def get_mongo_service(request: Request) -> MongoService:
    """Dependency provider for MongoService"""
    return request.app.state.mongo

def get_disk_storage(request: Request) -> DiskStorageService:
    """Dependency provider for DiskStorageService"""
    return request.app.state.disk

def get_current_user(request: Request) -> Identity:
    """Verifies the token header and attaches the identity to the request."""
    token = request.headers.get(settings.token_header)
    if not token:
        raise UnauthorizedException("No token provided.")
    identity = decode_token(token)
    request.state.user = identity
    return identity

def require_user(request: Request) -> Optional[Identity]:
    """Auth gate for protected routers; open when AUTH_REQUIRED is off."""
    if not settings.auth_required:
        return None
    return get_current_user(request)
