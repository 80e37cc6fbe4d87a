# Routes module
from .processing import router as processing_router

__all__ = ["processing_router"]
