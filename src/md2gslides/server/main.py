"""MCP Server initialization and authorizer factory."""

from fastmcp import FastMCP

from ..auth import UserAuthorizer, UserPrompt, get_client_config
from ..core.config import get_client_config_path, get_credentials_path

# Initialize MCP Server
mcp = FastMCP("md2gslides")


def get_authorizer(prompt: UserPrompt) -> UserAuthorizer:
    """Create a UserAuthorizer for the configured client and token cache.

    Args:
        prompt: Supplies the user's reply to the authorization URL.

    Raises:
        ConfigError: If the OAuth client configuration is missing or invalid.
    """
    client = get_client_config(get_client_config_path())
    return UserAuthorizer(client, prompt, file_path=get_credentials_path())
