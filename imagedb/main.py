from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
import uvicorn
import logging

from imagedb.storage.mongo import MongoService
from imagedb.storage.disk import DiskStorageService
from imagedb.settings import settings
from imagedb.routers.images import router as images_router
from imagedb.routers.tags import router as tags_router
from imagedb.routers.storage import router as storage_router
from imagedb.routers.auth import router as auth_router
from imagedb.auth_service.service import seed_admin
from imagedb.storage_service.service import FILES_PREFIX
from imagedb.middleware.logging import RequestLoggingMiddleware
from imagedb.exceptions import add_exception_handlers
from imagedb.models import Envelope, ok

logging.basicConfig(level=settings.log_level.upper())
log = logging.getLogger("imagedb")

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
        Async context manager for FastAPI application lifecycle events.
        Opens the MongoDB client and the storage directory once for the process.
    """
    # Initialize resources
    app.state.mongo = MongoService()
    app.state.disk = DiskStorageService()
    seed_admin(app.state.mongo)
    log.info("%s version %s ready", settings.app_title, settings.app_version)
    yield
    # Cleanup resources
    app.state.mongo.close()
    app.state.disk.close()

# Initialize App
app = FastAPI(
    title=settings.app_title,
    version=settings.app_version,
    lifespan=lifespan,
    description="Image metadata, tags and file storage API",
)

# Add exception handlers
add_exception_handlers(app)

# CORS - Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=['*'],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

# Add the routers
for router in (auth_router, images_router, storage_router, tags_router):
    app.include_router(router, prefix="/api")

# Stored files, created by DiskStorageService at startup
app.mount(FILES_PREFIX, StaticFiles(directory=settings.storage_dir, check_dir=False), name="files")

# Check Health
@app.get("/api", response_model=Envelope)
def read_root():
    """
        Default end point
    """
    return ok({"service": settings.app_title, "version": settings.app_version})

if __name__ == "__main__":
    uvicorn.run("imagedb.main:app", host=settings.bind_host, port=settings.port)
