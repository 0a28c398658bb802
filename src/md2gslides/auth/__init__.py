"""
OAuth 2.0 Authorization Package for md2gslides.

This package provides the user authorization layer:
- Authorization code flow with cached, per-user tokens
- File-backed credential store with atomic writes
- Extraction of authorization codes from pasted callback URLs
"""

from .scopes import SCOPES, SLIDES_SCOPE, DRIVE_SCOPE
from .client_config import (
    ClientConfig,
    get_client_config,
    load_client_config,
    load_client_config_from_env,
)
from .code_extractor import extract_code
from .credential_store import CredentialRecord, CredentialStore, JsonFileCredentialStore
from .user_authorizer import UserAuthorizer, UserPrompt

__all__ = [
    # Scopes
    "SCOPES",
    "SLIDES_SCOPE",
    "DRIVE_SCOPE",
    # Client configuration
    "ClientConfig",
    "get_client_config",
    "load_client_config",
    "load_client_config_from_env",
    # Credential Store
    "CredentialRecord",
    "CredentialStore",
    "JsonFileCredentialStore",
    # Authorization
    "extract_code",
    "UserAuthorizer",
    "UserPrompt",
]
