"""Configuration module -- exports Settings, load_config and build_pipeline_options."""

from showlist.config.loader import build_pipeline_options, load_config
from showlist.config.settings import Settings

__all__ = ["Settings", "build_pipeline_options", "load_config"]
