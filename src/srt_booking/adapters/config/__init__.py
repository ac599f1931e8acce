"""Configuration adapters."""

from srt_booking.adapters.config.app_config import AppConfig

__all__ = ["AppConfig"]
