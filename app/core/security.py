"""
Access-token minting / validation (JWT signed with HS256, wrapped in JWE)
and password hashing (bcrypt).

This module is the only place that creates or reads a signed access token.
Refresh tokens are opaque random strings; their lifecycle lives in the
auth service and the ``refresh_tokens`` table.
"""

from __future__ import annotations

import base64
import logging
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from jose import jwe, jwt
from jose.exceptions import ExpiredSignatureError, JOSEError
from passlib.context import CryptContext

from app.core.config import ENCRYPTION_BY_KEY_LENGTH, Settings, decode_base64_key

if TYPE_CHECKING:
    from app.models.user import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 15
REFRESH_TOKEN_EXPIRE_DAYS = 7
REFRESH_TOKEN_BYTES = 64


# ── Passwords ───────────────────────────────────────────────────────
def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def get_password_hash(plain: str) -> str:
    return pwd_context.hash(plain)


# ── Token types ─────────────────────────────────────────────────────
class InvalidTokenError(Exception):
    """Raised by :meth:`TokenService.get_principal_from_expired_token`."""


@dataclass(frozen=True)
class Principal:
    """Identity decoded from a valid access token.

    ``role`` is the raw claim string; the authorization gate parses it.
    """

    user_id: uuid.UUID
    name: str
    email: str
    role: str
    token_id: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class TokenValidation:
    principal: Principal | None = None
    error: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.principal is not None


@dataclass(frozen=True)
class RefreshTokenValue:
    token: str
    expires_at: datetime
    created_at: datetime


@dataclass(frozen=True)
class UserSummary:
    """Detached copy of the user a session was issued for."""

    id: uuid.UUID
    name: str
    email: str
    role: str
    created_at: datetime | None


@dataclass(frozen=True)
class IssuedTokens:
    access_token: str
    expires_at: datetime
    refresh: RefreshTokenValue
    user: UserSummary

    @property
    def refresh_token(self) -> str:
        return self.refresh.token


# ── Token service ───────────────────────────────────────────────────
class TokenService:
    """Issues and validates access tokens against the given settings.

    Keys are decoded on every call so the service always reflects the
    current configuration object.
    """

    def __init__(self, config: Settings) -> None:
        self.config = config

    # -- keys --------------------------------------------------------
    def _signing_key(self) -> bytes:
        return decode_base64_key(self.config.AUTH_SIGNING_KEY, "AUTH_SIGNING_KEY")

    def _encryption_key(self) -> tuple[bytes, str]:
        key = decode_base64_key(self.config.AUTH_ENCRYPTION_KEY, "AUTH_ENCRYPTION_KEY")
        try:
            return key, ENCRYPTION_BY_KEY_LENGTH[len(key)]
        except KeyError:
            raise ValueError(
                "Auth configuration 'AUTH_ENCRYPTION_KEY' must decode to 16, 24 or 32 bytes."
            ) from None

    # -- issuing -----------------------------------------------------
    def generate_tokens(self, user: "User", client_ip: str) -> IssuedTokens:
        """Mint an access token and a fresh refresh token for *user*."""
        now = datetime.now(timezone.utc).replace(microsecond=0)
        expires_at = now + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
        claims: dict[str, Any] = {
            "sub": str(user.id),
            "name": user.name,
            "email": user.email,
            "role": user.role.value,
            "jti": str(uuid.uuid4()),
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        if self.config.AUTH_ISSUER.strip():
            claims["iss"] = self.config.AUTH_ISSUER.strip()
        if self.config.AUTH_AUDIENCE.strip():
            claims["aud"] = self.config.AUTH_AUDIENCE.strip()

        signed = jwt.encode(claims, self._signing_key(), algorithm=JWT_ALGORITHM)
        key, encryption = self._encryption_key()
        access_token = jwe.encrypt(signed, key, algorithm="dir", encryption=encryption)
        if isinstance(access_token, bytes):
            access_token = access_token.decode("ascii")

        logger.debug("Issued access token %s for user %s (%s)", claims["jti"], user.id, client_ip)
        return IssuedTokens(
            access_token=access_token,
            expires_at=expires_at,
            refresh=self.generate_refresh_token(),
            user=UserSummary(
                id=user.id,
                name=user.name,
                email=user.email,
                role=user.role.value,
                created_at=user.created_at,
            ),
        )

    @staticmethod
    def generate_refresh_token() -> RefreshTokenValue:
        now = datetime.now(timezone.utc)
        return RefreshTokenValue(
            token=base64.b64encode(secrets.token_bytes(REFRESH_TOKEN_BYTES)).decode("ascii"),
            expires_at=now + timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS),
            created_at=now,
        )

    # -- validation --------------------------------------------------
    def validate_token(self, token: str) -> TokenValidation:
        """Full validation: signature, algorithm, issuer/audience, expiry (with skew).

        Never raises; failures come back as ``TokenValidation(error=...)``.
        """
        try:
            return TokenValidation(principal=self._decode(token, verify_exp=True))
        except ExpiredSignatureError:
            return TokenValidation(error="token expired")
        except InvalidTokenError as exc:
            return TokenValidation(error=str(exc))
        except (JOSEError, ValueError) as exc:
            return TokenValidation(error=f"invalid token: {exc}")

    def get_principal_from_expired_token(self, token: str) -> Principal:
        """Identify the holder of a possibly expired token.

        Signature and algorithm are still enforced; only the lifetime check is skipped.
        """
        try:
            return self._decode(token, verify_exp=False)
        except InvalidTokenError:
            raise
        except (JOSEError, ValueError) as exc:
            raise InvalidTokenError("Invalid token") from exc

    def _decode(self, token: str, *, verify_exp: bool) -> Principal:
        key, _ = self._encryption_key()
        signed = jwe.decrypt(token, key)
        if isinstance(signed, bytes):
            signed = signed.decode("ascii")

        header = jwt.get_unverified_header(signed)
        if header.get("alg") != JWT_ALGORITHM:
            raise InvalidTokenError(f"unexpected signing algorithm {header.get('alg')!r}")

        issuer = self.config.AUTH_ISSUER.strip() or None
        audience = self.config.AUTH_AUDIENCE.strip() or None
        claims = jwt.decode(
            signed,
            self._signing_key(),
            algorithms=[JWT_ALGORITHM],
            audience=audience,
            issuer=issuer,
            options={
                "verify_aud": audience is not None,
                "verify_iss": issuer is not None,
                "verify_exp": verify_exp,
                # require_exp forces verify_exp in jose; a missing exp still fails below
                "require_exp": verify_exp,
                "leeway": int(self.config.clock_skew.total_seconds()),
            },
        )
        try:
            return Principal(
                user_id=uuid.UUID(claims["sub"]),
                name=claims.get("name", ""),
                email=claims.get("email", ""),
                role=claims.get("role", ""),
                token_id=claims.get("jti", ""),
                issued_at=datetime.fromtimestamp(int(claims["iat"]), tz=timezone.utc),
                expires_at=datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidTokenError(f"malformed claims: {exc}") from exc
