"""
Lucky Nine Configuration.

Environment variables, deployment constants, and logging configuration.
"""

from luckynine.config.settings import Settings, configure_logging, get_settings

__all__ = ["Settings", "configure_logging", "get_settings"]
