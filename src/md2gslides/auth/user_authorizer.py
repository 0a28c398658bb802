"""
Core Google OAuth Logic for md2gslides.

This module drives the authorization code flow: reuse cached tokens when they
still work, otherwise ask the user to authorize, exchange the code and cache
the new tokens.
"""

import logging
import os
from typing import Callable, List, Optional, Sequence, Union

import requests
from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

from ..utils.errors import (
    AuthorizationError,
    AuthorizationErrorKind,
    NetworkError,
    StorageError,
)
from .client_config import ClientConfig
from .code_extractor import extract_code
from .credential_store import CredentialRecord, CredentialStore, JsonFileCredentialStore
from .scopes import normalize_scopes

UserPrompt = Callable[[str], str]

INVALID_CODE_MESSAGE = (
    "Authorization code is invalid or malformed. This can happen if:\n"
    "- The code has expired (codes are only valid for ~10 minutes)\n"
    "- The redirect URI doesn't match your OAuth client configuration\n"
    "- The code was corrupted during copy/paste\n"
    "\nPlease try the authorization process again with a fresh authorization URL."
)


class UserAuthorizer:
    """
    OAuth authorizer using the basic authorization code flow.

    Tokens are cached per user in a CredentialStore. A handle returned by
    get_authorized_client is owned by the caller; tokens it refreshes later
    are not written back to the store.
    """

    def __init__(
        self,
        client: ClientConfig,
        prompt: UserPrompt,
        file_path: Optional[str] = None,
        store: Optional[CredentialStore] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize the authorizer.

        Args:
            client: OAuth client id, secret and redirect URI.
            prompt: Called with the authorization URL, returns what the user
                pasted back (callback URL or bare code).
            file_path: Token cache file. Ignored when ``store`` is given.
            store: Credential store to use instead of a JSON file store.
            logger: Logger to use instead of the module logger.
        """
        self.client = client
        self.prompt = prompt
        self.logger = logger or logging.getLogger(__name__)
        self.store = store or JsonFileCredentialStore(file_path, logger=self.logger)

    def get_authorized_client(
        self, user: str, scopes: Union[str, Sequence[str]]
    ) -> Credentials:
        """
        Get credentials for a user, authorizing interactively if needed.

        Args:
            user: Key of the user in the token cache.
            scopes: OAuth scopes, space separated or as a list.

        Returns:
            Authorized Google credentials.

        Raises:
            AuthorizationError: If the user input has no usable code or the
                token exchange fails.
            StorageError: If the token cache cannot be read or written.
        """
        scope_list = normalize_scopes(scopes)
        self.store.load()

        record = self.store.get(user)
        if record:
            self.logger.debug("Using existing tokens")
            credentials = record.to_credentials(self.client)
            if self._probe(credentials):
                return credentials
            self.logger.debug("Existing tokens invalid, need new authorization")

        self.logger.debug("Getting new authorization")
        flow = self._create_flow(scope_list)
        auth_url, _ = flow.authorization_url(access_type="online")

        user_input = self.prompt(auth_url)
        code = extract_code(user_input)

        self.logger.debug(f"Attempting token exchange with code length: {len(code)}")
        self.logger.debug(f"Redirect URI: {self.client.redirect_uri}")

        record = self._exchange_code(flow, code, scope_list)

        self.store.put(user, record)
        try:
            self.store.persist()
        except StorageError:
            self.logger.error(
                "Token exchange succeeded but credentials could not be saved"
            )
            raise

        self.logger.info(f"Authorized user: {user}")
        return record.to_credentials(self.client)

    def _create_flow(self, scopes: List[str]) -> Flow:
        # No PKCE: the code may be exchanged by a later process
        return Flow.from_client_config(
            self.client.to_client_secrets(),
            scopes=scopes,
            redirect_uri=self.client.redirect_uri,
            autogenerate_code_verifier=False,
        )

    def _probe(self, credentials: Credentials) -> bool:
        """Check that cached credentials still grant access."""
        if credentials.valid:
            return True
        if not credentials.refresh_token:
            self.logger.debug("Cached token expired and has no refresh token")
            return False
        try:
            credentials.refresh(Request())
        except (RefreshError, TransportError) as e:
            self.logger.debug(f"Token refresh failed: {e}")
            return False
        return credentials.valid

    def _exchange_code(
        self, flow: Flow, code: str, scopes: List[str]
    ) -> CredentialRecord:
        # Google may return a superset of the requested scopes
        os.environ.setdefault("OAUTHLIB_RELAX_TOKEN_SCOPE", "1")

        try:
            token = flow.fetch_token(code=code)
        except OAuth2Error as e:
            self.logger.debug("Token exchange failed")
            self.logger.debug(f"Error details: {e}")
            message = f"{e.error}: {e.description}" if e.description else str(e)
            if e.error == "invalid_grant" or "Malformed auth code" in message:
                raise AuthorizationError(INVALID_CODE_MESSAGE) from e
            raise AuthorizationError(
                f"Token exchange was rejected ({message}). "
                "Check the client id, client secret and redirect URI in your "
                "client configuration."
            ) from e
        except requests.exceptions.RequestException as e:
            self.logger.debug(f"Token exchange failed: {e}")
            raise NetworkError(
                f"Could not reach the token endpoint: {e}. "
                "Check your network connection and re-run authorization."
            ) from e

        if not token.get("access_token"):
            raise AuthorizationError(
                "Token endpoint response did not include an access token.",
                AuthorizationErrorKind.TOKEN_EXCHANGE_FAILED,
            )

        record = CredentialRecord.from_token_response(token)
        if not record.scope:
            record.scope = " ".join(scopes)
        return record
