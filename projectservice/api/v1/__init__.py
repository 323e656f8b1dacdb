"""
API v1 Router

Organization scoped endpoints are prefixed with /organizations/{organizationId}.
"""

from fastapi import APIRouter
from . import members, organizations
from .invitations import router_me as invites_me_router
from .invitations import router_scoped as invites_scoped_router

router = APIRouter()

router.include_router(organizations.router, tags=["Organizations"])
router.include_router(
    members.router, prefix="/organizations/{organizationId}", tags=["Members"]
)
router.include_router(
    invites_scoped_router, prefix="/organizations/{organizationId}", tags=["Invitations"]
)
router.include_router(invites_me_router, tags=["Invitations"])


@router.get("/", tags=["API"])
async def api_root():
    """API root: returns version and available endpoints."""
    return {
        "api": "v1",
        "version": "0.1.0",
        "endpoints": [
            "/organizations",
            "/organizations/personal",
            "/organizations/{organizationId}/members",
            "/organizations/{organizationId}/invites",
            "/organizations/{organizationId}/follow",
            "/invites/me",
        ],
    }
