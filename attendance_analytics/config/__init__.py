"""
Configuration package for the attendance analytics engine.

This package contains the environment settings and logging setup
shared by every analytics service.
"""

from attendance_analytics.config.settings import Settings, get_settings, settings
from attendance_analytics.config.logging import build_logging_config, setup_logging

__all__ = [
    'Settings',
    'get_settings',
    'settings',
    'build_logging_config',
    'setup_logging',
]
