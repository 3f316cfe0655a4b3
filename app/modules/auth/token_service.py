"""
Session token issuance and validation.

Tokens are stateless HS256 JWTs: nothing is stored server-side, so the service
is a plain value holding its own key material. Access tokens are short-lived
and carry the caller's group ids; refresh tokens are long-lived, never carry
group ids, and are only exchanged for a new pair.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional
import logging

import jwt as pyjwt

from app.core.errors import ExpiredToken, InvalidToken, TokenKindMismatch
from app.modules.auth.schemas import TokenClaims, TokenPair, TokenType

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
# Only the HMAC family is accepted on decode; "none" and asymmetric algs are rejected
ACCEPTED_ALGORITHMS = ["HS256", "HS384", "HS512"]
REQUIRED_CLAIMS = ["exp", "iat", "nbf", "iss", "sub"]

DEFAULT_ACCESS_TTL = timedelta(minutes=15)
DEFAULT_REFRESH_TTL = timedelta(days=7)


class TokenService:
    def __init__(
        self,
        secret: str,
        access_ttl: timedelta = DEFAULT_ACCESS_TTL,
        refresh_ttl: timedelta = DEFAULT_REFRESH_TTL,
        issuer: str = "fileshare-backend",
    ):
        if not secret:
            raise ValueError("token signing secret must not be empty")
        self._secret = secret
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.issuer = issuer

    def issue(self, user_id: str, email: str, group_ids: Optional[List[str]] = None) -> TokenPair:
        """Mint an access + refresh token pair for an authenticated identity."""
        access_token, access_expires_at = self._generate(
            user_id, email, group_ids, TokenType.ACCESS, self.access_ttl
        )
        refresh_token, _ = self._generate(user_id, email, None, TokenType.REFRESH, self.refresh_ttl)
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=access_expires_at,
        )

    def _generate(
        self,
        user_id: str,
        email: str,
        group_ids: Optional[List[str]],
        token_type: TokenType,
        ttl: timedelta,
    ):
        now = datetime.now(timezone.utc)
        expires_at = now + ttl
        payload = {
            "sub": str(user_id),
            "user_id": str(user_id),
            "email": email,
            "type": token_type.value,
            "iss": self.issuer,
            "iat": now,
            "nbf": now,
            "exp": expires_at,
        }
        if group_ids is not None:
            payload["group_ids"] = [str(g) for g in group_ids]
        token = pyjwt.encode(payload, self._secret, algorithm=ALGORITHM)
        return token, expires_at

    def validate(self, token: str, expected_type: TokenType) -> TokenClaims:
        """Verify signature, algorithm, issuer and expiry, then the token kind.

        Raises:
            ExpiredToken: the token's exp has passed.
            TokenKindMismatch: valid token of the wrong kind.
            InvalidToken: any other verification failure.
        """
        if not token:
            raise InvalidToken()
        try:
            payload = pyjwt.decode(
                token,
                self._secret,
                algorithms=ACCEPTED_ALGORITHMS,
                issuer=self.issuer,
                options={"require": REQUIRED_CLAIMS},
            )
        except pyjwt.ExpiredSignatureError:
            raise ExpiredToken()
        except pyjwt.InvalidTokenError as e:
            logger.debug("Token rejected: %s", e)
            raise InvalidToken()

        subject = payload.get("sub")
        if not subject or payload.get("user_id", subject) != subject:
            raise InvalidToken("invalid token: bad subject")

        try:
            token_type = TokenType(payload.get("type"))
        except ValueError:
            raise InvalidToken("invalid token: unknown token type")
        if token_type != expected_type:
            raise TokenKindMismatch()

        return TokenClaims(
            user_id=subject,
            email=payload.get("email", ""),
            group_ids=payload.get("group_ids") or [],
            type=token_type,
            issuer=payload["iss"],
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )

    def validate_access(self, token: str) -> TokenClaims:
        return self.validate(token, TokenType.ACCESS)

    def validate_refresh(self, token: str) -> TokenClaims:
        return self.validate(token, TokenType.REFRESH)
