"""Configuration adapters."""

from kmb_eta.adapters.config.app_config import AppConfig

__all__ = ["AppConfig"]
