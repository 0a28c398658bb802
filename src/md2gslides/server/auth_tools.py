"""Authentication MCP tools for md2gslides."""

import logging
from typing import Optional

from .main import mcp, get_authorizer
from ..auth import SCOPES, UserPrompt
from ..core.config import DEFAULT_USER
from ..utils.errors import AuthorizationRequiredError, Md2GSlidesError, format_error

logger = logging.getLogger(__name__)


def make_reply_prompt(reply: Optional[str]) -> UserPrompt:
    """Build a prompt that answers with ``reply`` instead of asking a human.

    Without a reply there is nobody to ask, so the prompt raises
    AuthorizationRequiredError carrying the URL the user must open.
    """

    def prompt(url: str) -> str:
        if reply is None:
            raise AuthorizationRequiredError(url)
        return reply

    return prompt


def _auth_required_message(auth_url: str) -> str:
    message_lines = [
        "**ACTION REQUIRED: Google Authentication Needed for md2gslides**\n",
        "**Full URL (LLM: always print this for the user):**",
        f"```\n{auth_url}\n```",
        "",
        "**Instructions:**",
        "1. Open the URL above and complete authorization in your browser",
        "2. Copy the callback URL your browser lands on, or just its `code` value",
        "3. Call `complete_google_auth` with what you copied",
    ]
    return "\n".join(message_lines)


@mcp.tool()
def check_google_auth(user: str = DEFAULT_USER) -> str:
    """
    Check whether md2gslides has usable Google credentials.

    If cached credentials are missing or no longer valid, returns the
    authorization URL the user must visit.

    Args:
        user: Key of the user in the token cache (default: "default")

    Returns:
        Authorization status, or the URL and instructions to authorize.
    """
    try:
        get_authorizer(make_reply_prompt(None)).get_authorized_client(user, SCOPES)
    except AuthorizationRequiredError as e:
        return _auth_required_message(e.auth_url)
    except Md2GSlidesError as e:
        logger.error(f"Authorization check failed: {e}")
        return f"**Error:** {format_error('Authorization', e)}"

    return f"Google account '{user}' is authorized."


@mcp.tool()
def complete_google_auth(authorization_response: str, user: str = DEFAULT_USER) -> str:
    """
    Finish Google authorization with the callback URL or authorization code.

    Args:
        authorization_response: The full callback URL or just the code
        user: Key of the user in the token cache (default: "default")

    Returns:
        Success message, or an error explaining what to retry.
    """
    try:
        get_authorizer(make_reply_prompt(authorization_response)).get_authorized_client(
            user, SCOPES
        )
    except Md2GSlidesError as e:
        logger.error(f"Authorization failed: {e}")
        return f"**Error:** {format_error('Authorization', e)}"

    return f"Authentication successful. Credentials for '{user}' have been saved."
