"""API v1 router aggregator.

All v1 endpoint routers are included here.
"""

from fastapi import APIRouter

from hirepath.api.v1 import candidates, onboarding

router = APIRouter()

# =============================================================================
# Candidate pipeline
# =============================================================================

router.include_router(candidates.router, prefix="/candidates", tags=["candidates"])

# =============================================================================
# Onboarding
# =============================================================================

router.include_router(onboarding.router, tags=["onboarding"])
