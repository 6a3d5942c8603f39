"""Opaque tokens for remember-me cookies, activation and reset links."""

import secrets

TOKEN_BYTES = 32


def new_token(nbytes: int = TOKEN_BYTES) -> str:
    """Generate a random URL-safe token from the OS CSPRNG."""
    return secrets.token_urlsafe(nbytes)
