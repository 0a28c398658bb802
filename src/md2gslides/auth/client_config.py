"""
OAuth Client Configuration for md2gslides.

Loads the OAuth client id and secret downloaded from the Google Cloud Console
(``client_id.json``), or from environment variables.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..core.config import GOOGLE_AUTH_URI, GOOGLE_TOKEN_URI, OOB_REDIRECT_URI
from ..utils.errors import ConfigError

logger = logging.getLogger(__name__)

EXPECTED_SHAPE = (
    'Expected {"web": {"client_id", "client_secret", "redirect_uris"}} '
    'or {"installed": {"client_id", "client_secret"}}.'
)


@dataclass(frozen=True)
class ClientConfig:
    """OAuth client registration used for the authorization code flow."""

    client_id: str
    client_secret: str
    redirect_uri: str = OOB_REDIRECT_URI
    client_type: str = "installed"

    def to_client_secrets(self) -> Dict[str, Any]:
        """
        Render the configuration in the client secrets format.

        Returns:
            Dict accepted by ``Flow.from_client_config``.
        """
        return {
            self.client_type: {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uris": [self.redirect_uri],
                "auth_uri": GOOGLE_AUTH_URI,
                "token_uri": GOOGLE_TOKEN_URI,
            }
        }


def parse_client_config(
    client_config: Any, source: Optional[str] = None
) -> ClientConfig:
    """
    Validate a parsed client secrets document.

    Args:
        client_config: Parsed JSON content.
        source: Where the content came from, for error messages.

    Returns:
        The client configuration.

    Raises:
        ConfigError: If the document has neither shape or lacks credentials.
    """
    if not isinstance(client_config, dict):
        raise ConfigError(
            f"Client configuration must be a JSON object. {EXPECTED_SHAPE}", source
        )

    if "web" in client_config:
        client_type = "web"
    elif "installed" in client_config:
        client_type = "installed"
    else:
        raise ConfigError(
            'Client configuration must contain either "web" or "installed". '
            f"{EXPECTED_SHAPE}",
            source,
        )

    creds = client_config[client_type]
    if not isinstance(creds, dict):
        raise ConfigError(
            f'"{client_type}" must be a JSON object. {EXPECTED_SHAPE}', source
        )

    if client_type == "web":
        redirect_uris = creds.get("redirect_uris")
        if (
            not isinstance(redirect_uris, list)
            or not redirect_uris
            or not all(isinstance(uri, str) and uri for uri in redirect_uris)
        ):
            raise ConfigError(
                "Web client requires redirect_uris (a non-empty list of URIs) "
                "in the client configuration.",
                source,
            )
        redirect_uri = redirect_uris[0]
    else:
        redirect_uri = OOB_REDIRECT_URI

    if not creds.get("client_id") or not creds.get("client_secret"):
        raise ConfigError(
            "Missing client_id or client_secret in client configuration.", source
        )

    logger.info(f"Using {client_type} OAuth client type")
    if client_type == "web":
        logger.info(f"Using web client with redirect URI: {redirect_uri}")

    return ClientConfig(
        client_id=creds["client_id"],
        client_secret=creds["client_secret"],
        redirect_uri=redirect_uri,
        client_type=client_type,
    )


def load_client_config(client_config_path: str) -> ClientConfig:
    """
    Load the client configuration file.

    Args:
        client_config_path: Path to client_id.json.

    Returns:
        The client configuration.

    Raises:
        ConfigError: If the file is missing, unparsable or incomplete.
    """
    path = os.path.expanduser(client_config_path)
    try:
        with open(path, "r") as f:
            client_config = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(
            "Client configuration file not found. Download the OAuth client "
            "JSON from the Google Cloud Console and save it at this path.",
            path,
        ) from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Client configuration is not valid JSON: {e}", path) from e
    except OSError as e:
        raise ConfigError(f"Error loading client configuration: {e}", path) from e

    return parse_client_config(client_config, path)


def load_client_config_from_env() -> Optional[ClientConfig]:
    """
    Load the client configuration from environment variables.

    Returns:
        Client configuration or None if not set.
    """
    client_id = os.getenv("GOOGLE_OAUTH_CLIENT_ID")
    client_secret = os.getenv("GOOGLE_OAUTH_CLIENT_SECRET")

    if not (client_id and client_secret):
        return None

    redirect_uri = os.getenv("GOOGLE_OAUTH_REDIRECT_URI")
    logger.info("Loaded OAuth credentials from environment variables")
    if redirect_uri:
        return ClientConfig(client_id, client_secret, redirect_uri, "web")
    return ClientConfig(client_id, client_secret)


def get_client_config(client_config_path: str) -> ClientConfig:
    """
    Load the client configuration from environment variables or file.

    Args:
        client_config_path: Path to client_id.json (fallback).

    Returns:
        The client configuration.
    """
    env_config = load_client_config_from_env()
    if env_config:
        return env_config
    return load_client_config(client_config_path)
