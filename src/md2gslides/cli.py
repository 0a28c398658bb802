"""Command line entry point that authorizes md2gslides for a Google account."""

import argparse
import logging
import sys
import webbrowser
from typing import List, Optional

from .auth import SCOPES, UserAuthorizer, get_client_config
from .core.config import DEFAULT_USER, get_client_config_path, get_credentials_path
from .utils.errors import Md2GSlidesError, format_error


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="md2gslides-auth",
        description="Authorize md2gslides to access Google Slides and Drive",
    )
    parser.add_argument(
        "-u",
        "--user",
        default=DEFAULT_USER,
        help="Email address of user",
    )
    parser.add_argument(
        "-n",
        "--no-browser",
        action="store_true",
        dest="headless",
        help="Headless mode - do not launch browsers, just shows URLs",
    )
    parser.add_argument(
        "--client-config",
        default=None,
        help="Path to the OAuth client JSON (default: ~/.md2googleslides/client_id.json)",
    )
    parser.add_argument(
        "--credentials",
        default=None,
        help="Path to the token cache (default: ~/.md2googleslides/credentials.json)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def make_console_prompt(headless: bool):
    """Build a prompt that shows the authorization URL and reads the reply."""

    def prompt(url: str) -> str:
        if headless:
            print("Authorize this app by visiting this url: ")
            print(url)
        else:
            print("Authorize this app in your browser.")
            webbrowser.open(url)
        print("\nAfter authorization, you can either:")
        print(
            "- Paste the complete callback URL "
            "(e.g., http://localhost:3000/oauth/callback?code=...)"
        )
        print("- Or just paste the authorization code from the URL")
        return input("\nEnter the callback URL or authorization code: ")

    return prompt


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        client = get_client_config(args.client_config or get_client_config_path())
        authorizer = UserAuthorizer(
            client,
            make_console_prompt(args.headless),
            file_path=args.credentials or get_credentials_path(),
        )
        authorizer.get_authorized_client(args.user, SCOPES)
    except Md2GSlidesError as e:
        print(format_error("Authorization", e), file=sys.stderr)
        return 1
    except (KeyboardInterrupt, EOFError):
        print("\nAuthorization cancelled.", file=sys.stderr)
        return 1

    print(f"Authorized user '{args.user}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
