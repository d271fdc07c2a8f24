"""API v1 router aggregator.

URL structure with /api/v1 prefix.

All v1 endpoint routers are included here.
"""

from fastapi import APIRouter

from codepass.api.v1 import auth

router = APIRouter()

# =============================================================================
# Authentication
# =============================================================================

_AUTH_PREFIX = "/auth"

router.include_router(auth.router, prefix=_AUTH_PREFIX, tags=["auth"])
