"""md2gslides MCP Server - authorization tools."""

from .main import mcp, get_authorizer

from . import auth_tools

__all__ = ["mcp", "get_authorizer", "main"]


def main():
    """Entry point for the md2gslides MCP server."""
    mcp.run(show_banner=False)
