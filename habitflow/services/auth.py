from __future__ import annotations

import logging
import time
from typing import Optional

from jose import JWTError, jwt

from habitflow.constants import LOGIN_PATH, REGISTER_PATH
from habitflow.data import api_client
from habitflow.data.schemas import Credentials
from habitflow.errors import MalformedInput, RemoteRejection

logger = logging.getLogger(__name__)


def decode_claims(token: Optional[str]) -> dict:
    """Read the payload segment of a JWT without verifying it."""
    if not token:
        return {}
    try:
        return dict(jwt.get_unverified_claims(token))
    except JWTError:
        return {}


class TokenStore:
    def __init__(self, token: Optional[str] = None):
        self._token = token or None

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None

    @property
    def subject(self) -> Optional[str]:
        return decode_claims(self._token).get("sub")

    def is_expired(self, now: Optional[float] = None) -> bool:
        exp = decode_claims(self._token).get("exp")
        if exp is None:
            return False
        try:
            return float(exp) < (time.time() if now is None else now)
        except (TypeError, ValueError):
            return True

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token) and not self.is_expired()


def _credentials(email, password) -> Credentials:
    clean_email = (email or "").strip()
    if not clean_email or "@" not in clean_email:
        raise MalformedInput("A valid email is required")
    if not password:
        raise MalformedInput("Password cannot be empty")
    return Credentials(email=clean_email, password=password)


class AuthService:
    def __init__(self, tokens: TokenStore):
        self.tokens = tokens

    def login(self, email, password) -> str:
        payload = api_client.request(
            "POST",
            LOGIN_PATH,
            json=_credentials(email, password).to_payload(),
            auth=False,
        )
        token = (payload or {}).get("token") if isinstance(payload, dict) else None
        if not token:
            raise RemoteRejection("Login response did not include a token", detail=payload)
        self.tokens.set(token)
        logger.info("Logged in as %s", self.tokens.subject or email)
        return token

    def register(self, email, password) -> None:
        api_client.request(
            "POST",
            REGISTER_PATH,
            json=_credentials(email, password).to_payload(),
            auth=False,
        )

    def logout(self) -> None:
        self.tokens.clear()
