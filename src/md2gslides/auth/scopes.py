"""
Google OAuth Scopes for md2gslides.

This module defines the OAuth scopes required for Google Slides and Drive access.
"""

from typing import List, Sequence, Union

SLIDES_SCOPE = "https://www.googleapis.com/auth/presentations"
DRIVE_SCOPE = "https://www.googleapis.com/auth/drive"

SCOPES = [SLIDES_SCOPE, DRIVE_SCOPE]


def normalize_scopes(scopes: Union[str, Sequence[str]]) -> List[str]:
    """
    Turn a space separated scope string or a list of scopes into a list.

    Returns:
        List of unique scopes, in the order given.
    """
    if isinstance(scopes, str):
        scopes = scopes.split()
    return list(dict.fromkeys(scope for scope in scopes if scope))
