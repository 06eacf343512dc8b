"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields.  Tests
and embedding applications may construct their own ``Settings`` and
pass it to ``create_app`` instead of relying on the module level
instance.
"""

import os
from dataclasses import dataclass
from typing import List


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Lecturer Ratings API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

    # Path to the SQLite file backing the key-value store.  Relative
    # paths are resolved against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "lecturers.db")

    # Seconds a connection waits on a locked database before failing.
    store_timeout: float = float(os.getenv("STORE_TIMEOUT", "5.0"))

    # Comma‑separated list of course sections seeded at startup and
    # returned when the catalog is empty or unreachable.
    default_courses: str = os.getenv(
        "DEFAULT_COURSES", "ENG 101-1,ENG 101-2,MATH 101-1,MATH 101-2"
    )

    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))

    @property
    def course_list(self) -> List[str]:
        """Default course sections as a list, blanks removed."""
        return [c.strip() for c in self.default_courses.split(",") if c.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
