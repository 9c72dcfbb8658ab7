"""
Configuration package for ytmweb

Settings are loaded from YAML files and environment variables and shared
through a singleton. Session cookie handling and request signing live in
`ytmweb.config.auth`, imported directly by the modules that need them.

Usage:

    from ytmweb.config import get_settings

    settings = get_settings()
    timeout = settings.network.request_timeout
"""

from .settings import get_settings, reload_settings, Settings

__all__ = [
    'get_settings',
    'reload_settings',
    'Settings',
]
