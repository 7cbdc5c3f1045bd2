"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ──────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/config.yaml  -- Static defaults checked into the repo
#   2. .env file           -- Local developer overrides (not committed)
#   3. Environment vars    -- Set by cron / CI at run time
#
# load_config() reads the YAML file first, then deep-merges the values
# that were explicitly set through Settings on top.
#
# The _deep_merge helper does recursive dict merging:
#   base = {"pipeline": {"rollover_days": 30}}
#   overrides = {"pipeline": {"timezone": "America/New_York"}}
#   result = {"pipeline": {"rollover_days": 30, "timezone": "America/New_York"}}
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import ValidationError

from showlist.config.settings import Settings
from showlist.models.pipeline import PipelineOptions
from showlist.utils.errors import ConfigurationError


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Environment variables (via Settings) override YAML values where keys
    overlap.  A missing YAML file is not an error; built-in defaults apply.

    Args:
        path: Path to the YAML configuration file.
        settings: Pre-built Settings (mainly for tests); read from the
            environment when omitted.

    Returns:
        Fully resolved configuration dictionary.

    Raises:
        ConfigurationError: If the YAML file is malformed or not a mapping.
    """
    config_path = Path(path)
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}") from exc
        if not isinstance(yaml_config, dict):
            raise ConfigurationError(f"Top level of {config_path} must be a mapping")
    else:
        yaml_config = {}

    settings = settings or Settings()
    explicit = settings.model_fields_set
    env_overrides: dict = {
        "app": _pick(settings, explicit, env="app_env"),
        "sources": _pick(settings, explicit, events_file="events_file", venues_file="venues_file"),
        "output": _pick(settings, explicit, dir="output_dir"),
        "pipeline": _pick(settings, explicit, timezone="timezone"),
        "logging": _pick(settings, explicit, level="log_level"),
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def build_pipeline_options(config: dict) -> PipelineOptions:
    """Build validated :class:`PipelineOptions` from the ``pipeline`` section.

    Raises:
        ConfigurationError: If a value fails validation or the timezone is
            unknown to the zoneinfo database.
    """
    section = config.get("pipeline") or {}
    try:
        options = PipelineOptions(**section)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid pipeline configuration: {exc}") from exc

    try:
        ZoneInfo(options.timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown timezone: {options.timezone}") from exc
    return options


def _pick(settings: Settings, explicit: set[str], **mapping: str) -> dict:
    """Return ``{config_key: value}`` for settings fields set in the environment."""
    return {
        config_key: getattr(settings, field_name)
        for config_key, field_name in mapping.items()
        if field_name in explicit
    }


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
