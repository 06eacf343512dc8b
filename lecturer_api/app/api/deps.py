"""
Shared FastAPI dependencies.

Services are created once per application in ``create_app`` and kept
on ``app.state``; these helpers hand them to route functions.  Request
bodies are accepted either as JSON or as form data, because the forum
UI posts plain form fields.
"""

from typing import Any, Dict, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from lecturer_api.app.core.errors import InvalidArgument
from lecturer_api.app.services.catalog_service import CatalogService
from lecturer_api.app.services.lecturer_service import LecturerService

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_catalog_service(request: Request) -> CatalogService:
    return request.app.state.catalog_service


def get_lecturer_service(request: Request) -> LecturerService:
    return request.app.state.lecturer_service


async def read_payload(request: Request) -> Dict[str, Any]:
    """Return the request body as a dictionary.

    JSON bodies are decoded as JSON; anything else is parsed as form
    data.  Raises :class:`InvalidArgument` if the body is not an
    object.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except ValueError as exc:
            raise InvalidArgument(f"Malformed JSON body: {exc}") from exc
    else:
        form = await request.form()
        data = {key: value for key, value in form.items()}
    if not isinstance(data, dict):
        raise InvalidArgument("Request body must be an object")
    return data


def parse_body(model: Type[ModelT], data: Dict[str, Any]) -> ModelT:
    """Validate ``data`` against ``model``, mapping failures to ``InvalidArgument``."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise InvalidArgument(problems or "Invalid request body") from exc
