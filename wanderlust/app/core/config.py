"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables.  Defaults are provided for all fields so the application can
start locally without any setup.  Outside of production a ``.env`` file
in the working directory is loaded first, so secrets such as the session
key or the image service credentials can live there during development.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


if os.getenv("APP_ENV", "development") != "production":
    load_dotenv()


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Wanderlust")
    environment: str = os.getenv("APP_ENV", "development")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Secret used to sign the session cookie.
    secret_key: str = os.getenv("SECRET_KEY", "change_me")

    # Path to the SQLite database.  Relative paths are resolved against
    # the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "wanderlust.db")

    session_cookie: str = os.getenv("SESSION_COOKIE", "session")
    # Lifetime of a session (cookie and stored row), seconds.  One week.
    session_max_age: int = int(os.getenv("SESSION_MAX_AGE", str(7 * 24 * 60 * 60)))
    # An unmodified session is only written back once this many seconds
    # have passed since its last save.
    session_touch_after: int = int(os.getenv("SESSION_TOUCH_AFTER", str(24 * 60 * 60)))

    # Cloudinary credentials.  When any of them is missing, uploaded
    # images are stored on the local disk under ``upload_dir``.
    cloud_name: str = os.getenv("CLOUD_NAME", "")
    cloud_api_key: str = os.getenv("CLOUD_API_KEY", "")
    cloud_api_secret: str = os.getenv("CLOUD_API_SECRET", "")
    cloud_folder: str = os.getenv("CLOUD_FOLDER", "wanderlust_DEV")
    upload_dir: str = os.getenv("UPLOAD_DIR", "uploads")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8080"))

    @property
    def cloud_configured(self) -> bool:
        return bool(self.cloud_name and self.cloud_api_key and self.cloud_api_secret)


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
