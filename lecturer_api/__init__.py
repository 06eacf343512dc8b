"""
Top‑level package for the Lecturer Ratings API.

This file makes ``lecturer_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``lecturer_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
