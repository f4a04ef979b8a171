"""JWT access and refresh token issuance."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

from jose import JWTError, jwt

from gathrio.config import Settings
from gathrio.core.exceptions import InvalidToken

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(frozen=True)
class TokenIdentity:
    """Identity carried inside a signed token."""

    user_id: str
    email: str
    role: str

    def to_claims(self) -> dict[str, Any]:
        return {"user_id": self.user_id, "email": self.email, "role": self.role}


class TokenService:
    """Mints and verifies bearer tokens with the configured secrets.

    Verification is pure: no database access, safe to call from any
    number of concurrent requests.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def access_token_lifetime(self) -> timedelta:
        return timedelta(minutes=self.settings.access_token_expire_minutes)

    @property
    def refresh_token_lifetime(self) -> timedelta:
        return timedelta(days=self.settings.refresh_token_expire_days)

    def issue_access_token(self, identity: TokenIdentity, expires_delta: timedelta | None = None) -> str:
        """Create a short-lived access token.

        Args:
            identity: User identity to encode
            expires_delta: Optional custom lifetime. Defaults to the configured access lifetime

        Returns:
            Encoded JWT string
        """
        return self._encode(
            identity,
            token_type=ACCESS_TOKEN_TYPE,
            lifetime=expires_delta if expires_delta is not None else self.access_token_lifetime,
            key=self.settings.secret_key,
        )

    def issue_refresh_token(self, identity: TokenIdentity, expires_delta: timedelta | None = None) -> str:
        """Create a long-lived refresh token.

        Args:
            identity: User identity to encode
            expires_delta: Optional custom lifetime. Defaults to the configured refresh lifetime

        Returns:
            Encoded JWT string
        """
        return self._encode(
            identity,
            token_type=REFRESH_TOKEN_TYPE,
            lifetime=expires_delta if expires_delta is not None else self.refresh_token_lifetime,
            key=self.settings.refresh_signing_key,
        )

    def verify_access_token(self, token: str) -> TokenIdentity:
        """Decode and verify an access token.

        Args:
            token: JWT string presented by the client

        Returns:
            TokenIdentity: Identity encoded in the token

        Raises:
            InvalidToken: If the signature is invalid, the token is malformed,
                expired, or not an access token
        """
        return self._decode(token, token_type=ACCESS_TOKEN_TYPE, key=self.settings.secret_key)

    def verify_refresh_token(self, token: str) -> TokenIdentity:
        """Decode and verify a refresh token.

        Raises:
            InvalidToken: If verification fails
        """
        return self._decode(token, token_type=REFRESH_TOKEN_TYPE, key=self.settings.refresh_signing_key)

    def _encode(self, identity: TokenIdentity, token_type: str, lifetime: timedelta, key: str) -> str:
        now = datetime.now(timezone.utc)
        to_encode = identity.to_claims()
        to_encode.update(
            {
                "type": token_type,
                "iat": now,
                "exp": now + lifetime,
                # two tokens minted in the same second must still differ
                "jti": uuid4().hex,
            }
        )
        return jwt.encode(to_encode, key, algorithm=self.settings.algorithm)

    def _decode(self, token: str, token_type: str, key: str) -> TokenIdentity:
        try:
            payload = jwt.decode(token, key, algorithms=[self.settings.algorithm])
        except JWTError as exc:
            raise InvalidToken() from exc

        if payload.get("type") != token_type:
            raise InvalidToken()

        try:
            return TokenIdentity(
                user_id=str(payload["user_id"]),
                email=str(payload["email"]),
                role=str(payload["role"]),
            )
        except KeyError as exc:
            raise InvalidToken() from exc
