"""
Core utilities package for md2gslides.

This package provides shared configuration.
"""

from .config import (
    DEFAULT_USER,
    GOOGLE_AUTH_URI,
    GOOGLE_TOKEN_URI,
    OOB_REDIRECT_URI,
    get_client_config_path,
    get_credentials_path,
    get_home_dir,
)

__all__ = [
    "DEFAULT_USER",
    "GOOGLE_AUTH_URI",
    "GOOGLE_TOKEN_URI",
    "OOB_REDIRECT_URI",
    "get_client_config_path",
    "get_credentials_path",
    "get_home_dir",
]
