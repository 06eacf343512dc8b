"""
Course catalog endpoint for API v1.

Returns the list of course sections offered in the lecturer picker.
The route is public and never fails: if the catalog cannot be read
the configured default sections are returned instead.
"""

from typing import List

from fastapi import APIRouter, Depends

from lecturer_api.app.api.deps import get_catalog_service
from lecturer_api.app.services.catalog_service import CatalogService

router = APIRouter()


@router.get("/courses", response_model=List[str])
async def list_courses(catalog: CatalogService = Depends(get_catalog_service)) -> List[str]:
    """Return all known course sections."""
    return await catalog.available_sections()
