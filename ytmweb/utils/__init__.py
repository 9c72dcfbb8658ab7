"""
Utilities package
Common helpers, logging, and utility functions
"""

from .logger import (
    get_logger,
    configure_from_settings,
    setup_logging,
    log_performance,
    get_current_log_file
)
from .helpers import (
    format_duration,
    parse_duration_string,
    normalize_thumbnail_url,
    parse_count,
    truncate_string
)

__all__ = [
    # Logger exports
    'get_logger',
    'configure_from_settings',
    'setup_logging',
    'log_performance',
    'get_current_log_file',

    # Helper exports
    'format_duration',
    'parse_duration_string',
    'normalize_thumbnail_url',
    'parse_count',
    'truncate_string',
]
