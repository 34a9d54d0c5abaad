"""API route handlers."""

from .matching import router as matching_router
from .cache import router as cache_router
from .profiles import router as profiles_router
