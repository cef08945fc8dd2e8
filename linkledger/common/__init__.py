"""Common utilities for the link ledger."""

from .validators import is_valid_url, is_valid_code
from .short_url import build_base_url, build_short_url, forwarded_path_prefix
from .logging_config import setup_logging, get_logger

__all__ = [
    "is_valid_url",
    "is_valid_code",
    "build_base_url",
    "build_short_url",
    "forwarded_path_prefix",
    "setup_logging",
    "get_logger",
]
