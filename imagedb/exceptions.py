"""
    Centralized exception handling for the FastAPI application.
"""
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
from typing import Dict, Optional

from imagedb.models import Envelope

log = logging.getLogger(__name__)

class APIException(Exception):
    """Base class for API exceptions."""
    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(self.detail)

class ImageNotFoundException(APIException):
    """Exception for when an image document is not found."""
    def __init__(self, image_id: str):
        super().__init__(status_code=404, detail=f"Image with ID '{image_id}' not found.")

class ImageConflictException(APIException):
    """Exception for inserting an image whose ID already exists."""
    def __init__(self, image_id: str):
        super().__init__(status_code=409, detail=f"Record already exists at id={image_id}")

class FileNotFoundException(APIException):
    """Exception for when a stored file is not found."""
    def __init__(self, filename: str):
        super().__init__(status_code=404, detail=f"File '{filename}' not found.")

class UserNotFoundException(APIException):
    def __init__(self, email: str):
        super().__init__(status_code=404, detail=f"User '{email}' not found.")

class UnauthorizedException(APIException):
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(status_code=401, detail=detail)

class BadRequestException(APIException):
    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail)

class MissingUploadException(BadRequestException):
    """Exception for a storage upload without a file part."""
    def __init__(self):
        super().__init__(detail="No file was uploaded.")

class DatabaseException(APIException):
    """Exception for MongoDB failures."""
    def __init__(self, detail: str):
        super().__init__(status_code=500, detail=detail)

class FileStorageException(APIException):
    """Exception for local disk storage failures."""
    def __init__(self, detail: str):
        super().__init__(status_code=500, detail=detail)

def envelope_response(status_code: int, msg: str, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=Envelope(status=status_code, msg=msg).model_dump(),
        headers=headers,
    )

async def api_exception_handler(request: Request, exc: APIException):
    """Handles API exceptions."""
    if exc.status_code >= 500:
        log.error(f"API Exception: {exc.detail}", exc_info=exc)
    else:
        log.info(f"API Exception: {exc.detail}")
    return envelope_response(exc.status_code, exc.detail)

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handles Starlette/FastAPI HTTP exceptions."""
    log.info(f"HTTP Exception: {exc.detail}")
    return envelope_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reports malformed query/body parameters as a bad request."""
    errors = exc.errors()
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg", ""))
    detail = "; ".join(parts) or "Invalid request"
    log.info(f"Validation error: {detail}")
    return envelope_response(400, detail)

async def generic_exception_handler(request: Request, exc: Exception):
    """Handles all other exceptions."""
    log.error(f"Unhandled Exception: {str(exc)}", exc_info=exc)
    return envelope_response(500, "An unexpected error occurred.")

def add_exception_handlers(app):
    """Adds exception handlers to the FastAPI app."""
    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
