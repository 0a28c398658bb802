"""
Shared configuration for md2gslides.

This module centralizes configuration values to avoid hardcoded values
scattered throughout the codebase.
"""

import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Out-of-band redirect used by installed (desktop) OAuth clients
OOB_REDIRECT_URI = "urn:ietf:wg:oauth:2.0:oob"

GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"

DEFAULT_USER = "default"

CREDENTIALS_FILENAME = "credentials.json"
CLIENT_CONFIG_FILENAME = "client_id.json"


def get_home_dir() -> str:
    """
    Get the md2gslides configuration directory.

    Returns:
        Path from MD2GSLIDES_HOME, or ~/.md2googleslides.
    """
    return os.path.expanduser(os.getenv("MD2GSLIDES_HOME", "~/.md2googleslides"))


def get_credentials_path() -> str:
    """Get the path of the token cache file."""
    return os.path.join(get_home_dir(), CREDENTIALS_FILENAME)


def get_client_config_path() -> str:
    """Get the path of the OAuth client configuration file."""
    return os.path.join(get_home_dir(), CLIENT_CONFIG_FILENAME)
