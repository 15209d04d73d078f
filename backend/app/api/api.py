"""
API Router Aggregator.

Combines all v1 API routers into a single router for the main app.
"""

from fastapi import APIRouter

from app.api.v1 import admin, auth, company, employee, employers, flyers, housekeepers, public

api_router = APIRouter()

# Include all v1 routers with their prefixes and tags
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"],
)

api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["Admin"],
)

api_router.include_router(
    company.router,
    prefix="/company",
    tags=["Company"],
)

api_router.include_router(
    employee.router,
    prefix="/employee",
    tags=["Employee"],
)

api_router.include_router(
    employers.router,
    tags=["Employers"],
)

api_router.include_router(
    housekeepers.router,
    tags=["Housekeepers"],
)

api_router.include_router(
    flyers.router,
    prefix="/flyer",
    tags=["Flyers"],
)

api_router.include_router(
    public.router,
    tags=["Public"],
)
