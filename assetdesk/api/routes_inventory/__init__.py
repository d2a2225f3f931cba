"""
Inventory API Routes.

RESTful endpoints for inventory management:
- Departments (create, rename, list)
- Items (CRUD, transfer via department change)
- Custom fields (definitions)
- Activity feed and dashboard summary
"""
from fastapi import APIRouter

from .activity import router as activity_router
from .custom_fields import router as custom_fields_router
from .departments import router as departments_router
from .items import router as items_router

# Create main router and include sub-routers
router = APIRouter()
router.include_router(departments_router)
router.include_router(items_router)
router.include_router(custom_fields_router)
router.include_router(activity_router)

__all__ = ["router"]
