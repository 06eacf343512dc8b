"""
Pydantic schemas for lecturers and votes.

A lecturer belongs to exactly one course section and carries a running
vote tally.  Request bodies mirror the form fields posted by the forum
UI (``courseSection``, ``lecturerName``, ``voteType``); responses use
the same camelCase keys the UI reads back.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LecturerCreate(BaseModel):
    """Body of ``POST /add``."""

    model_config = ConfigDict(populate_by_name=True)

    course_section: str = Field(..., alias="courseSection", description="Course section the lecturer teaches, e.g. 'MATH 101-1'")
    lecturer_name: str = Field(..., alias="lecturerName", description="Lecturer's display name, unique within the section")


class VoteCreate(BaseModel):
    """Body of ``POST /vote``."""

    model_config = ConfigDict(populate_by_name=True)

    course_section: str = Field(..., alias="courseSection")
    lecturer_name: str = Field(..., alias="lecturerName")
    vote_type: str = Field(..., alias="voteType", description="Either 'up' or 'down'")


class LecturerRead(BaseModel):
    """A stored lecturer record."""

    model_config = ConfigDict(populate_by_name=True)

    course_section: str = Field(..., alias="courseSection")
    name: str
    votes: int = 0
    added_by: str = Field(..., alias="addedBy")
    timestamp: int = Field(..., description="Creation time in milliseconds since the epoch")


class ActionResult(BaseModel):
    """Outcome of an add or vote request.

    ``success`` is ``False`` when the request was valid but refused by a
    business rule (duplicate lecturer, repeated vote); ``message`` then
    explains why.
    """

    success: bool
    message: Optional[str] = None
