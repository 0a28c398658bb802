"""Custom exceptions for md2gslides authorization.

This module provides structured error handling with specific exception types
for different failure scenarios. All exceptions inherit from Md2GSlidesError.
"""
from enum import Enum
from typing import Optional


class Md2GSlidesError(Exception):
    """Base exception for all md2gslides errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format the error message."""
        return self.message


class ConfigError(Md2GSlidesError):
    """Raised when the OAuth client configuration is missing or invalid.

    Attributes:
        path: Optional path of the configuration file.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        self.path = path
        super().__init__(message)

    def format_message(self) -> str:
        if self.path:
            return f"{self.message} (config: {self.path})"
        return self.message


class StorageError(Md2GSlidesError):
    """Raised when the token cache cannot be read, parsed or written.

    Attributes:
        path: Path of the token cache file.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        self.path = path
        super().__init__(message)

    def format_message(self) -> str:
        if self.path:
            return f"{self.message} (cache: {self.path})"
        return self.message


class AuthorizationErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    TOKEN_EXCHANGE_FAILED = "token_exchange_failed"
    NETWORK = "network"
    USER_ACTION_REQUIRED = "user_action_required"


class AuthorizationError(Md2GSlidesError):
    """Raised when the OAuth authorization flow cannot complete.

    Attributes:
        kind: Which step of the flow failed.
    """

    def __init__(
        self,
        message: str,
        kind: AuthorizationErrorKind = AuthorizationErrorKind.TOKEN_EXCHANGE_FAILED,
    ) -> None:
        self.kind = kind
        super().__init__(message)


class InputErrorReason(str, Enum):
    EMPTY = "empty"
    MALFORMED_URL = "malformed_url"
    MISSING_CODE_PARAM = "missing_code_param"


class InputError(AuthorizationError):
    """Raised when the user reply does not contain an authorization code."""

    def __init__(self, message: str, reason: InputErrorReason) -> None:
        self.reason = reason
        super().__init__(message, AuthorizationErrorKind.INVALID_INPUT)


class NetworkError(AuthorizationError):
    """Raised when the token endpoint cannot be reached."""

    def __init__(self, message: str) -> None:
        super().__init__(message, AuthorizationErrorKind.NETWORK)


class AuthorizationRequiredError(AuthorizationError):
    """Raised by non-interactive prompts when the user has to visit a URL.

    Attributes:
        auth_url: The authorization URL the user must open.
    """

    def __init__(self, auth_url: str) -> None:
        self.auth_url = auth_url
        super().__init__(
            f"Authentication required. Please visit: {auth_url}",
            AuthorizationErrorKind.USER_ACTION_REQUIRED,
        )


# Standard error message format helper
def format_error(action: str, error: Exception) -> str:
    """Format an error message consistently.

    Args:
        action: The action that failed (e.g., "Authorization").
        error: The exception that occurred.

    Returns:
        Formatted error string.
    """
    if isinstance(error, Md2GSlidesError):
        return f"{action} failed: {error.format_message()}"
    return f"{action} failed: {str(error)}"
