"""Opaque bearer-token authentication."""

from __future__ import annotations

import hmac
from dataclasses import dataclass


class UnauthorizedError(Exception):
    """Missing or unknown credentials."""


@dataclass(frozen=True, slots=True)
class Principal:
    user_id: str


class StaticTokenVerifier:
    """Verifies tokens against a fixed token -> user id table from settings."""

    def __init__(self, tokens: dict[str, str]) -> None:
        self._tokens = dict(tokens)

    def verify(self, token: str) -> Principal | None:
        for known, user_id in self._tokens.items():
            if hmac.compare_digest(known.encode(), token.encode()):
                return Principal(user_id=user_id)
        return None


def parse_bearer(header: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
