"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# pydantic-settings reads each field from (in priority order):
#
#   1. **Environment variables** -- e.g. SHOWLIST_EVENTS_FILE=data/events.txt
#   2. **.env file** -- key=value lines in the project root .env file
#
# Every field is prefixed with ``SHOWLIST_`` in the environment, so
# ``output_dir`` maps to ``SHOWLIST_OUTPUT_DIR``.
#
# Only fields that were actually set in the environment override the
# YAML defaults in config/config.yaml (see loader.py).
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Showlist runtime settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SHOWLIST_",
        extra="ignore",
    )

    # === Source and output locations ===
    events_file: str = "data/events.txt"
    venues_file: str = "data/venues.txt"
    output_dir: str = "public/data"

    # === Pipeline ===
    timezone: str = "America/Los_Angeles"

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"
