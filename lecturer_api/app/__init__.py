"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules.  Course catalog and lecturer voting each live in their own
service module and expose a router defined in ``api/v1/endpoints``.
Versioning is handled by grouping routers under the
``api/<version>/`` hierarchy.
"""

from .main import app  # noqa: F401
