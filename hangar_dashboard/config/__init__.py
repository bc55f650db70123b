"""Configuration loading for Hangar Dashboard."""

from hangar_dashboard.config.loader import find_config_file, load_hangar_config
from hangar_dashboard.config.schema import HangarConfig

__all__ = ["HangarConfig", "find_config_file", "load_hangar_config"]
