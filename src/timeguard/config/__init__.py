"""Configuration layer — settings, message catalog, logging."""

from timeguard.config.settings import TimeguardSettings, configure, get_settings, reset_settings

__all__ = ["TimeguardSettings", "configure", "get_settings", "reset_settings"]
