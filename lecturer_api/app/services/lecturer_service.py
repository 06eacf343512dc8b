"""
Service layer for lecturers and their votes.

Storage layout (all keys live in the shared key-value store):

* ``lecturer:<section>:<name>`` – the lecturer object with fields
  ``courseSection``, ``name``, ``votes``, ``addedBy`` and ``timestamp``.
* ``lecturers:<section>`` – set of lecturer names in a section, used to
  enumerate lecturers.  A name is in this set iff its object exists.
* ``lecturer:votes:<section>:<name>`` – set of caller ids who already
  voted on the lecturer.

Section and name are percent-encoded inside keys, so every
(section, name) pair maps to its own keys.

Each caller may vote once per lecturer, either up (+1) or down (-1).
Votes are never retracted or changed.  Duplicate lecturers and repeated
votes are not errors; they come back as ``created=False`` /
``accepted=False`` results with a short reason that the UI shows as is.

Lecturer creation is a conditional insert performed in one store
transaction together with the index update, so two concurrent adds of
the same lecturer create exactly one record.  Ballot recording relies
on the store's atomic set-add, and the tally on its atomic increment.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import quote

from pydantic import ValidationError

from lecturer_api.app.core.errors import InvalidArgument, StoreUnavailable
from lecturer_api.app.core.store import KeyValueStore
from lecturer_api.app.schemas.lecturer import LecturerRead

logger = logging.getLogger(__name__)

VOTE_DELTAS = {"up": 1, "down": -1}

ALREADY_EXISTS = "already exists"
ALREADY_VOTED = "already voted"
NOT_FOUND = "lecturer not found"


def _part(value: str) -> str:
    # Percent-encoded, so ":" inside a section or name never acts as a separator.
    return quote(value, safe="")


def lecturer_key(course_section: str, lecturer_name: str) -> str:
    return f"lecturer:{_part(course_section)}:{_part(lecturer_name)}"


def index_key(course_section: str) -> str:
    return f"lecturers:{_part(course_section)}"


def ballot_key(course_section: str, lecturer_name: str) -> str:
    return f"lecturer:votes:{_part(course_section)}:{_part(lecturer_name)}"


@dataclass
class AddResult:
    created: bool
    reason: Optional[str] = None


@dataclass
class VoteResult:
    accepted: bool
    reason: Optional[str] = None


def _require(value: Optional[str], label: str) -> str:
    """Strip ``value`` and reject it when empty."""
    if value is None or not str(value).strip():
        raise InvalidArgument(f"{label} is required")
    return str(value).strip()


class LecturerService:
    """Service for registering lecturers and recording votes."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def add_lecturer(self, course_section: str, lecturer_name: str, caller_id: str) -> AddResult:
        """Register a lecturer for a course section.

        Returns ``AddResult(created=False, reason="already exists")``
        when the section already has a lecturer with that name.
        """
        course_section = _require(course_section, "courseSection")
        lecturer_name = _require(lecturer_name, "lecturerName")
        caller_id = _require(caller_id, "caller id")
        record = {
            "courseSection": course_section,
            "name": lecturer_name,
            "votes": 0,
            "addedBy": caller_id,
            "timestamp": int(time.time() * 1000),
        }
        try:
            created = self.store.set_object_if_absent(
                lecturer_key(course_section, lecturer_name),
                record,
                index=(index_key(course_section), lecturer_name),
            )
        except StoreUnavailable as exc:
            logger.error("Failed to add lecturer %r to %r: %s", lecturer_name, course_section, exc.message)
            raise
        if not created:
            logger.info("Lecturer %r already exists in %r", lecturer_name, course_section)
            return AddResult(created=False, reason=ALREADY_EXISTS)
        logger.info("Lecturer %r added to %r by %s", lecturer_name, course_section, caller_id)
        return AddResult(created=True)

    async def vote(self, course_section: str, lecturer_name: str, caller_id: str, direction: str) -> VoteResult:
        """Record one vote by ``caller_id`` and update the tally.

        ``direction`` must be ``"up"`` or ``"down"``; anything else
        raises :class:`InvalidArgument`.  A caller who already voted on
        the lecturer gets ``VoteResult(accepted=False)`` and the tally
        is left untouched.
        """
        course_section = _require(course_section, "courseSection")
        lecturer_name = _require(lecturer_name, "lecturerName")
        caller_id = _require(caller_id, "caller id")
        delta = VOTE_DELTAS.get(str(direction).strip().lower() if direction is not None else "")
        if delta is None:
            raise InvalidArgument(f"voteType must be 'up' or 'down', got {direction!r}")

        key = lecturer_key(course_section, lecturer_name)
        try:
            if not self.store.object_exists(key):
                logger.info("Vote on unknown lecturer %r in %r", lecturer_name, course_section)
                return VoteResult(accepted=False, reason=NOT_FOUND)
            if not self.store.set_add(ballot_key(course_section, lecturer_name), caller_id):
                logger.info("%s already voted on %r in %r", caller_id, lecturer_name, course_section)
                return VoteResult(accepted=False, reason=ALREADY_VOTED)
            votes = self.store.incr_object_field(key, "votes", delta)
        except StoreUnavailable as exc:
            logger.error("Failed to record vote on %r in %r: %s", lecturer_name, course_section, exc.message)
            raise
        logger.debug("Lecturer %r in %r now has %d votes", lecturer_name, course_section, votes)
        return VoteResult(accepted=True)

    async def has_voted(self, course_section: str, lecturer_name: str, caller_id: str) -> bool:
        return self.store.is_set_member(ballot_key(course_section, lecturer_name), str(caller_id))

    async def get_lecturer(self, course_section: str, lecturer_name: str) -> Optional[LecturerRead]:
        """Load a single lecturer, or ``None`` if missing or malformed."""
        data = self.store.get_object(lecturer_key(course_section, lecturer_name))
        if not data:
            return None
        try:
            return LecturerRead.model_validate(data)
        except ValidationError as exc:
            logger.debug("Skipping malformed lecturer %r in %r: %s", lecturer_name, course_section, exc)
            return None

    async def list_lecturers(self, course_section: str) -> List[LecturerRead]:
        """Return the lecturers of a section in index order.

        Index entries whose record is missing or unreadable are skipped.
        """
        course_section = str(course_section).strip()
        try:
            names = self.store.get_set_members(index_key(course_section))
            lecturers: List[LecturerRead] = []
            for name in names:
                lecturer = await self.get_lecturer(course_section, name)
                if lecturer is not None:
                    lecturers.append(lecturer)
        except StoreUnavailable as exc:
            logger.error("Failed to list lecturers for %r: %s", course_section, exc.message)
            raise
        return lecturers
