"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from database.connection import DatabaseConnection
from database.repositories.subject_repo import SubjectRepository
from database.storage import MemoryStorage, MongoStorage
from api.routes import processing_router
from api.schemas.responses import ErrorResponse
from processing.pipeline import build_pipeline
from processing.queue import ProcessingQueue
from shared.config import settings

logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def create_storage():
    """Build the storage backend selected in settings."""
    if settings.storage_backend == "memory":
        return MemoryStorage()

    db = await DatabaseConnection.init_mongo()
    await SubjectRepository(db).seed_defaults()
    return MongoStorage(db)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    storage = await create_storage()
    queue = ProcessingQueue(build_pipeline(storage))
    queue.start()
    app.state.processing_queue = queue
    logger.info(f"Processing queue ready ({settings.storage_backend} storage)")

    yield

    # Shutdown
    await queue.stop()
    app.state.processing_queue = None
    await DatabaseConnection.close_connections()


# Create FastAPI app
app = FastAPI(
    title="Newspaper Brief Pipeline",
    description="Turns uploaded newspapers into subject-wise briefs",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error="Internal server error", detail=str(exc)).model_dump()
    )


# Include routers
app.include_router(processing_router)


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Newspaper Brief Pipeline",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug
    )
