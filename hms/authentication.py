"""
Token authentication used by the API.

Kept in its own module so that REST framework can import it from the
settings without pulling in any view code.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """DRF token authentication with an explicit ``Token`` keyword.

    Listed first in ``DEFAULT_AUTHENTICATION_CLASSES`` so that anonymous
    requests receive a 401 with a ``WWW-Authenticate: Token`` header.
    """

    keyword = 'Token'
