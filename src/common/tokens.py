"""Opaque access tokens.

The raw token is handed out once (invite links, preview links, verification links)
and only its SHA-256 digest is stored. Lookups hash the presented token and query
by digest, so a leaked database row cannot be turned back into a working link.
"""

import hashlib
import hmac
import secrets

TOKEN_BYTES = 32


def generate_token() -> str:
    """Return a URL-safe token made of 32 random bytes, without padding."""
    return secrets.token_urlsafe(TOKEN_BYTES)


def hash_token(token: str) -> str:
    """Return the hex SHA-256 digest of a token."""
    return hashlib.sha256(token.encode()).hexdigest()


def verify_token(token: str, token_hash: str) -> bool:
    """Check a raw token against a stored digest in constant time."""
    computed = hash_token(token)
    if len(computed) != len(token_hash):
        return False
    try:
        expected = bytes.fromhex(token_hash)
    except ValueError:
        return False
    return hmac.compare_digest(bytes.fromhex(computed), expected)


def generate_token_pair() -> tuple[str, str]:
    """Return a fresh ``(token, digest)`` pair."""
    token = generate_token()
    return token, hash_token(token)
