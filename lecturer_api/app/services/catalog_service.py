"""
Service layer for the course catalog.

The catalog is a single set (``courses:list``) of course section
identifiers such as ``MATH 101-1``.  It is seeded at startup from the
configured default list.  Seeding is additive: only sections missing
from the set are inserted, so sections added later by other means
survive a restart.

Reads fall back to the default list when the set is empty, and the
``available_sections`` path used by the course picker also falls back
when the store cannot be reached.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from lecturer_api.app.core.errors import StoreUnavailable
from lecturer_api.app.core.store import KeyValueStore

logger = logging.getLogger(__name__)

COURSES_KEY = "courses:list"


class CatalogService:
    """Service for the set of known course sections."""

    def __init__(self, store: KeyValueStore, default_courses: Sequence[str]):
        self.store = store
        self.default_courses: List[str] = list(default_courses)

    async def initialize(self) -> List[str]:
        """Insert every default section that is not yet in the catalog.

        Returns the sections that were added.  A failure on one section
        is logged and the remaining sections are still attempted; if
        none of them could be written the last error is raised.
        """
        added: List[str] = []
        last_error: StoreUnavailable | None = None
        failures = 0
        for course in self.default_courses:
            try:
                if self.store.is_set_member(COURSES_KEY, course):
                    continue
                if self.store.set_add(COURSES_KEY, course):
                    added.append(course)
                    logger.info("Course added: %s", course)
            except StoreUnavailable as exc:
                failures += 1
                last_error = exc
                logger.error("Failed to add course %s: %s", course, exc.message)
        if last_error is not None and failures == len(self.default_courses):
            raise last_error
        return added

    async def list_sections(self) -> List[str]:
        """Return all known sections, or the defaults if the catalog is empty.

        Raises :class:`StoreUnavailable` if the store cannot be read.
        """
        courses = self.store.get_set_members(COURSES_KEY)
        if not courses:
            return list(self.default_courses)
        return courses

    async def available_sections(self) -> List[str]:
        """Like :meth:`list_sections` but never fails."""
        try:
            return await self.list_sections()
        except StoreUnavailable as exc:
            logger.error("Failed to load courses, using defaults: %s", exc.message)
            return list(self.default_courses)
