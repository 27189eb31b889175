# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Bearer token verification using python-jose.

Tokens are issued by the school's identity provider. This service only
needs the caller's user id and role from them; ``create_token`` exists so
local tooling and tests can mint compatible tokens.

Example:
    >>> from gradebook.core.config import get_settings
    >>> verifier = TokenVerifier(get_settings().jwt)
    >>> token = verifier.create_token(user_id=7, role="TEACHER")
    >>> verifier.decode_token(token).user_id
    7
"""

import logging
from datetime import timedelta

from jose import ExpiredSignatureError, JWTError as JoseJWTError, jwt
from pydantic import BaseModel, ValidationError as PydanticValidationError

from gradebook.core.config.settings import JWTSettings
from gradebook.infrastructure.database.models import UserRole
from gradebook.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class TokenPayload(BaseModel):
    """Verified token claims.

    Attributes:
        sub: Subject (user id, as a string).
        role: Caller role.
        exp: Expiration timestamp.
        iat: Issued-at timestamp.
    """

    sub: str
    role: UserRole
    exp: int
    iat: int | None = None

    @property
    def user_id(self) -> int:
        return int(self.sub)


class TokenError(Exception):
    """Base exception for token verification."""

    pass


class TokenExpiredError(TokenError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(TokenError):
    """Raised when a token is malformed, badly signed or has bad claims."""

    pass


class TokenVerifier:
    """Decodes and validates bearer tokens.

    Attributes:
        _settings: JWT configuration settings.
    """

    def __init__(self, settings: JWTSettings) -> None:
        self._settings = settings

    def decode_token(self, token: str) -> TokenPayload:
        """Decode and validate a token.

        Args:
            token: Encoded JWT.

        Returns:
            Verified payload.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token cannot be trusted or its claims
                are malformed.
        """
        try:
            claims = jwt.decode(
                token,
                self._settings.secret_key.get_secret_value(),
                algorithms=[self._settings.algorithm],
            )
        except ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except JoseJWTError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e

        try:
            payload = TokenPayload.model_validate(claims)
        except PydanticValidationError as e:
            raise InvalidTokenError("Invalid token claims") from e

        if not payload.sub.isdigit():
            raise InvalidTokenError("Invalid token subject")

        return payload

    def create_token(
        self,
        user_id: int,
        role: UserRole | str,
        expires_in: timedelta | None = None,
    ) -> str:
        """Mint a token compatible with decode_token.

        Args:
            user_id: Subject user id.
            role: Caller role.
            expires_in: Lifetime; defaults to the configured expiry.

        Returns:
            Encoded JWT.
        """
        now = utc_now()
        lifetime = expires_in or timedelta(minutes=self._settings.access_token_expire_minutes)
        claims = {
            "sub": str(user_id),
            "role": UserRole(role).value,
            "iat": int(now.timestamp()),
            "exp": int((now + lifetime).timestamp()),
        }
        return jwt.encode(
            claims,
            self._settings.secret_key.get_secret_value(),
            algorithm=self._settings.algorithm,
        )
