"""
Credential Store for md2gslides.

This module provides a standardized interface for token storage and retrieval,
using a single local JSON file that maps user identifiers to token records.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from google.oauth2.credentials import Credentials

from ..core.config import GOOGLE_TOKEN_URI
from ..utils.errors import StorageError
from .client_config import ClientConfig


def _utcnow() -> datetime:
    # google-auth compares expiry against naive UTC datetimes
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass
class CredentialRecord:
    """Tokens issued for one user by the authorization server."""

    access_token: str
    refresh_token: Optional[str] = None
    expiry: Optional[datetime] = None
    scope: Optional[str] = None
    token_type: Optional[str] = None
    id_token: Optional[str] = None

    @classmethod
    def from_token_response(cls, token: Dict[str, Any]) -> "CredentialRecord":
        """
        Build a record from a token endpoint response.

        Args:
            token: Token dict as returned by ``Flow.fetch_token``.

        Returns:
            A new CredentialRecord.
        """
        expiry = None
        if token.get("expires_at"):
            expiry = datetime.fromtimestamp(
                float(token["expires_at"]), tz=timezone.utc
            ).replace(tzinfo=None)
        elif token.get("expires_in"):
            expiry = _utcnow() + timedelta(seconds=int(token["expires_in"]))

        scope = token.get("scope")
        if isinstance(scope, (list, tuple)):
            scope = " ".join(scope)

        return cls(
            access_token=token["access_token"],
            refresh_token=token.get("refresh_token"),
            expiry=expiry,
            scope=scope,
            token_type=token.get("token_type"),
            id_token=token.get("id_token"),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CredentialRecord":
        """
        Parse a record read from the token cache.

        Raises:
            ValueError: If the data is not a valid record.
        """
        if not isinstance(data, dict):
            raise ValueError("credential record must be a JSON object")
        access_token = data.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise ValueError("credential record is missing access_token")

        expiry = None
        if data.get("expiry"):
            expiry = datetime.fromisoformat(data["expiry"])
            # Ensure timezone-naive datetime for Google auth library
            if expiry.tzinfo is not None:
                expiry = expiry.astimezone(timezone.utc).replace(tzinfo=None)

        return cls(
            access_token=access_token,
            refresh_token=data.get("refresh_token"),
            expiry=expiry,
            scope=data.get("scope"),
            token_type=data.get("token_type"),
            id_token=data.get("id_token"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expiry": self.expiry.isoformat() if self.expiry else None,
            "scope": self.scope,
            "token_type": self.token_type,
            "id_token": self.id_token,
        }

    def to_credentials(self, client: ClientConfig) -> Credentials:
        """
        Wrap the record in an authorized Google credentials object.

        Args:
            client: OAuth client the tokens were issued to.

        Returns:
            Credentials usable with Google API clients.
        """
        return Credentials(
            token=self.access_token,
            refresh_token=self.refresh_token,
            id_token=self.id_token,
            token_uri=GOOGLE_TOKEN_URI,
            client_id=client.client_id,
            client_secret=client.client_secret,
            scopes=self.scope.split() if self.scope else None,
            expiry=self.expiry,
        )


class CredentialStore(ABC):
    """Abstract base class for credential storage."""

    @abstractmethod
    def load(self) -> None:
        """Read the backing storage into memory."""
        pass

    @abstractmethod
    def get(self, user: str) -> Optional[CredentialRecord]:
        """Get the record for a user, if any."""
        pass

    @abstractmethod
    def put(self, user: str, record: CredentialRecord) -> None:
        """Replace the record for a user in memory."""
        pass

    @abstractmethod
    def persist(self) -> None:
        """Write the in-memory records to the backing storage."""
        pass

    @abstractmethod
    def users(self) -> List[str]:
        """List all users with stored records."""
        pass


class JsonFileCredentialStore(CredentialStore):
    """
    Credential store backed by one JSON file.

    Nothing is created until the first access. Without a file path the
    records live in memory only.
    """

    def __init__(
        self,
        file_path: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize the credential store.

        Args:
            file_path: Path of the token cache file, or None for memory only.
            logger: Logger to use instead of the module logger.
        """
        self.file_path = os.path.expanduser(file_path) if file_path else None
        self.logger = logger or logging.getLogger(__name__)
        self._records: Optional[Dict[str, CredentialRecord]] = None

    def _ensure_loaded(self) -> Dict[str, CredentialRecord]:
        if self._records is None:
            self.load()
        return self._records  # type: ignore[return-value]

    def load(self) -> None:
        """
        Read the token cache into memory, creating it if needed.

        Raises:
            StorageError: If the file cannot be read or is not a map of
                credential records.
        """
        if self.file_path is None:
            if self._records is None:
                self._records = {}
                self.logger.debug("Using in-memory credential store")
            return

        if not os.path.exists(self.file_path):
            parent_dir = os.path.dirname(self.file_path)
            try:
                if parent_dir:
                    os.makedirs(parent_dir, exist_ok=True)
            except OSError as e:
                raise StorageError(
                    f"Could not create credentials directory: {e}", self.file_path
                ) from e
            self._write(self.file_path, {})
            self.logger.info(f"Created credential cache: {self.file_path}")

        try:
            with open(self.file_path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StorageError(
                f"Credential cache is not valid JSON: {e}. "
                "Delete the file and re-run authorization.",
                self.file_path,
            ) from e
        except OSError as e:
            raise StorageError(
                f"Could not read credential cache: {e}", self.file_path
            ) from e

        if not isinstance(data, dict):
            raise StorageError(
                "Credential cache must contain a JSON object keyed by user. "
                "Delete the file and re-run authorization.",
                self.file_path,
            )

        records: Dict[str, CredentialRecord] = {}
        for user, record in data.items():
            try:
                records[user] = CredentialRecord.from_dict(record)
            except (ValueError, TypeError) as e:
                raise StorageError(
                    f"Invalid credential record for '{user}': {e}", self.file_path
                ) from e

        self._records = records
        self.logger.debug(f"Loaded {len(records)} credential record(s)")

    def get(self, user: str) -> Optional[CredentialRecord]:
        return self._ensure_loaded().get(user)

    def put(self, user: str, record: CredentialRecord) -> None:
        self._ensure_loaded()[user] = record

    def persist(self) -> None:
        """
        Write all records to the token cache.

        The data goes to a temporary file in the same directory which then
        replaces the cache, so a failed write leaves the old file intact.

        Raises:
            StorageError: If the file cannot be written.
        """
        if self.file_path is None:
            return
        records = self._ensure_loaded()
        data = {user: record.to_dict() for user, record in records.items()}
        self._write(self.file_path, data)
        self.logger.info(f"Stored credentials for {len(records)} user(s)")

    def users(self) -> List[str]:
        return sorted(self._ensure_loaded())

    def _write(self, path: str, data: Dict[str, Any]) -> None:
        parent_dir = os.path.dirname(path) or "."
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                dir=parent_dir,
                prefix=".credentials-",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = f.name
                json.dump(data, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageError(
                f"Could not write credential cache: {e}", path
            ) from e
