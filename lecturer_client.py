"""Lecturer Ratings API client.

A small wrapper around the HTTP API for scripts, bots or tests that
need to drive the service the same way the forum UI does.  The client
uses the ``requests`` library internally and exposes one method per
route:

* :meth:`list_courses` – course sections for the picker.
* :meth:`add_lecturer` – register a lecturer for a section.
* :meth:`vote` – cast an up or down vote.
* :meth:`list_lecturers` – lecturers of a section with their tallies.

Every method returns a tuple ``(data, error)``.  Business refusals
(duplicate lecturer, repeated vote) are successful requests: ``data``
is then ``{"success": False, "message": ...}`` and ``error`` is
``None``.  ``error`` is only set when the request itself failed.

Authenticated routes need a bearer token, see ``create_token.py``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests


logger = logging.getLogger(__name__)

PLUGIN_PATH = "/api/v1/plugins/lecturer"

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


class LecturerAPI:
    """Client for the lecturer plugin routes."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``https://forum.example``.
            api_key: Optional bearer token sent as ``Authorization``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(self, method: str, path: str, *, form: Dict[str, Any] | None = None) -> Result:
        """Perform an HTTP request to the plugin API.

        Args:
            method: HTTP method (``GET`` or ``POST``).
            path: Path relative to the plugin prefix (e.g. ``/courses``).
            form: Form fields to send with a POST request.
        Returns:
            A tuple ``(data, error)``.  On failure ``error`` is a
            dictionary with keys ``status_code`` and ``message``.
        """
        url = f"{self.base_url}{PLUGIN_PATH}{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                data=form,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("error") or err_json.get("detail") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def list_courses(self) -> Tuple[List[str], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", "/courses")
        return data or [], error

    def add_lecturer(self, course_section: str, lecturer_name: str) -> Result:
        return self._request(
            "POST",
            "/add",
            form={"courseSection": course_section, "lecturerName": lecturer_name},
        )

    def vote(self, course_section: str, lecturer_name: str, vote_type: str) -> Result:
        """Vote ``"up"`` or ``"down"`` on a lecturer."""
        return self._request(
            "POST",
            "/vote",
            form={
                "courseSection": course_section,
                "lecturerName": lecturer_name,
                "voteType": vote_type,
            },
        )

    def list_lecturers(self, course_section: str) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Return the lecturers of a section, highest tally first."""
        data, error = self._request("GET", f"/list/{quote(course_section, safe='')}")
        lecturers = sorted(data or [], key=lambda item: item.get("votes", 0), reverse=True)
        return lecturers, error
