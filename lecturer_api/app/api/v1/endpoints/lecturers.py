"""
Lecturer endpoints for API v1.

Logged-in callers may add lecturers to a course section and vote on
them once each; anyone may list the lecturers of a section.  Refusals
by a business rule (duplicate lecturer, repeated vote) are returned
with HTTP 200 and ``{"success": false, "message": ...}`` so that
clients can tell them apart from failed requests.
"""

from typing import List

from fastapi import APIRouter, Depends, Request

from lecturer_api.app.api.deps import get_lecturer_service, parse_body, read_payload
from lecturer_api.app.core.security import require_login
from lecturer_api.app.schemas.lecturer import ActionResult, LecturerCreate, LecturerRead, VoteCreate
from lecturer_api.app.services.lecturer_service import LecturerService

router = APIRouter()


@router.post("/add", response_model=ActionResult, response_model_exclude_none=True)
async def add_lecturer(
    request: Request,
    uid: str = Depends(require_login),
    service: LecturerService = Depends(get_lecturer_service),
) -> ActionResult:
    """Register a lecturer for a course section."""
    body = parse_body(LecturerCreate, await read_payload(request))
    result = await service.add_lecturer(body.course_section, body.lecturer_name, uid)
    return ActionResult(success=result.created, message=result.reason)


@router.post("/vote", response_model=ActionResult, response_model_exclude_none=True)
async def vote_lecturer(
    request: Request,
    uid: str = Depends(require_login),
    service: LecturerService = Depends(get_lecturer_service),
) -> ActionResult:
    """Cast the caller's single up or down vote on a lecturer."""
    body = parse_body(VoteCreate, await read_payload(request))
    result = await service.vote(body.course_section, body.lecturer_name, uid, body.vote_type)
    return ActionResult(success=result.accepted, message=result.reason)


@router.get("/list/{course_section:path}", response_model=List[LecturerRead])
async def list_lecturers(
    course_section: str,
    service: LecturerService = Depends(get_lecturer_service),
) -> List[LecturerRead]:
    """Return the lecturers of a course section (order not guaranteed)."""
    return await service.list_lecturers(course_section)
