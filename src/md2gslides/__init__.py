"""md2gslides - Google Slides authorization package.

This package authorizes a local user against the Google Slides and Drive APIs
and caches the resulting tokens so later runs skip the interactive login.
"""
from .auth import UserAuthorizer, get_client_config

__version__ = "0.2.0"
__all__ = ["UserAuthorizer", "get_client_config"]
