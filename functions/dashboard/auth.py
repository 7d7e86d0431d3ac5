"""
Identity verification for dashboard requests carrying a Firebase ID token.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol


class AuthError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class IdentityVerifier(Protocol):
    def verify(self, id_token: str) -> str:
        """Returns the verified uid or raises AuthError."""
        ...


@dataclass
class InMemoryIdentityVerifier:
    """Test double mapping known tokens to uids."""

    tokens: dict = field(default_factory=dict)

    def verify(self, id_token: str) -> str:
        uid = self.tokens.get(id_token)
        if not uid:
            raise AuthError(401, "Invalid authentication token")
        return uid


class FirebaseIdentityVerifier:
    def __init__(self, app=None):
        self.app = app

    def verify(self, id_token: str) -> str:
        from firebase_admin import auth

        try:
            decoded = auth.verify_id_token(id_token, app=self.app)
        except (ValueError, auth.InvalidIdTokenError, auth.ExpiredIdTokenError) as e:
            raise AuthError(401, "Invalid authentication token") from e
        return decoded["uid"]


def authenticate(verifier: IdentityVerifier, id_token: Optional[str]) -> str:
    if not id_token:
        raise AuthError(401, "Missing authentication token")
    return verifier.verify(id_token)
