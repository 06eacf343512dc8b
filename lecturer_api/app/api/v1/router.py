"""
Top‑level router for version 1 of the API.

This router aggregates the domain routers under the plugin prefix
``/plugins/lecturer``.  The application mounts it at ``/api/v1``.
"""

from fastapi import APIRouter

from .endpoints import courses, lecturers

PLUGIN_PREFIX = "/plugins/lecturer"

router = APIRouter()

router.include_router(courses.router, prefix=PLUGIN_PREFIX, tags=["courses"])
router.include_router(lecturers.router, prefix=PLUGIN_PREFIX, tags=["lecturers"])
