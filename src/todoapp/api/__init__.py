"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter, so no list or item route can be reached
without a verified bearer token. Health and auth routers are open.
"""

from fastapi import APIRouter, Depends

from todoapp.api.auth import router as auth_router
from todoapp.api.health import router as health_router
from todoapp.api.items import router as items_router
from todoapp.api.lists import router as lists_router
from todoapp.auth.dependencies import get_current_user

_auth = [Depends(get_current_user)]

api_router = APIRouter()

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes — require a valid bearer token
protected = APIRouter(prefix="/api", dependencies=_auth)
protected.include_router(lists_router, tags=["lists"])
protected.include_router(items_router, tags=["items"])
api_router.include_router(protected)
