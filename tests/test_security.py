"""
Token service and password hashing tests.

Verifies:
1. Access tokens round-trip to the same identity and carry a fixed 15 minute lifetime
2. Tampered, foreign-algorithm and mis-addressed tokens are rejected
3. Expired tokens are rejected by validation but still identify their holder
"""

import base64
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwe, jwt

from app.core.config import settings
from app.core.security import (
    InvalidTokenError,
    TokenService,
    get_password_hash,
    verify_password,
)
from app.models.user import User, UserRole


def _user(role: UserRole = UserRole.EMPLOYEE) -> User:
    return User(
        id=uuid.uuid4(),
        name="Token Holder",
        email="holder@office.test",
        hashed_password="x",
        role=role,
        created_at=datetime.now(timezone.utc),
    )


def _claims(user: User, **overrides) -> dict:
    now = int(datetime.now(timezone.utc).timestamp())
    claims = {
        "sub": str(user.id),
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
        "jti": str(uuid.uuid4()),
        "iat": now,
        "exp": now + 900,
        "iss": settings.AUTH_ISSUER,
        "aud": settings.AUTH_AUDIENCE,
    }
    claims.update(overrides)
    return claims


def _seal(claims: dict, algorithm: str = "HS256") -> str:
    """Sign and encrypt *claims* with the configured keys."""
    signed = jwt.encode(claims, base64.b64decode(settings.AUTH_SIGNING_KEY), algorithm=algorithm)
    token = jwe.encrypt(
        signed,
        base64.b64decode(settings.AUTH_ENCRYPTION_KEY),
        algorithm="dir",
        encryption="A256GCM",
    )
    return token.decode() if isinstance(token, bytes) else token


# ── Passwords ───────────────────────────────────────────────────────
def test_password_hash_roundtrip():
    hashed = get_password_hash("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_password_hash_is_salted():
    assert get_password_hash("same") != get_password_hash("same")


# ── Issuing ─────────────────────────────────────────────────────────
def test_generated_token_validates_to_same_identity(token_service: TokenService):
    user = _user(UserRole.JURY)
    issued = token_service.generate_tokens(user, "10.0.0.1")

    result = token_service.validate_token(issued.access_token)

    assert result.is_valid, result.error
    assert result.principal.user_id == user.id
    assert result.principal.role == "JURY"
    assert result.principal.email == user.email
    assert issued.user.id == user.id


def test_access_token_lifetime_is_fifteen_minutes(token_service: TokenService):
    before = datetime.now(timezone.utc)
    issued = token_service.generate_tokens(_user(), "10.0.0.1")

    principal = token_service.validate_token(issued.access_token).principal
    assert principal.expires_at - principal.issued_at == timedelta(minutes=15)
    assert abs((issued.expires_at - before) - timedelta(minutes=15)) <= timedelta(seconds=1)


def test_refresh_token_is_64_random_bytes_valid_for_seven_days(token_service: TokenService):
    issued = token_service.generate_tokens(_user(), "10.0.0.1")
    refresh = issued.refresh

    assert len(base64.b64decode(refresh.token)) == 64
    assert abs((refresh.expires_at - refresh.created_at) - timedelta(days=7)) <= timedelta(seconds=1)
    assert token_service.generate_refresh_token().token != refresh.token


def test_each_token_has_unique_jti(token_service: TokenService):
    user = _user()
    first = token_service.validate_token(token_service.generate_tokens(user, "ip").access_token)
    second = token_service.validate_token(token_service.generate_tokens(user, "ip").access_token)
    assert first.principal.token_id != second.principal.token_id


# ── Rejection ───────────────────────────────────────────────────────
def test_flipped_ciphertext_byte_fails_validation(token_service: TokenService):
    token = token_service.generate_tokens(_user(), "ip").access_token
    parts = token.split(".")
    segment = parts[3]
    i = len(segment) // 2
    parts[3] = segment[:i] + ("A" if segment[i] != "A" else "B") + segment[i + 1 :]

    result = token_service.validate_token(".".join(parts))

    assert not result.is_valid
    assert result.principal is None


def test_altered_inner_signature_fails_validation(token_service: TokenService):
    user = _user()
    signed = jwt.encode(_claims(user), base64.b64decode(settings.AUTH_SIGNING_KEY), algorithm="HS256")
    header, payload, signature = signed.split(".")
    i = len(signature) // 2
    signature = signature[:i] + ("A" if signature[i] != "A" else "B") + signature[i + 1 :]
    token = jwe.encrypt(
        f"{header}.{payload}.{signature}",
        base64.b64decode(settings.AUTH_ENCRYPTION_KEY),
        algorithm="dir",
        encryption="A256GCM",
    )
    token = token.decode() if isinstance(token, bytes) else token

    assert not token_service.validate_token(token).is_valid


def test_garbage_token_is_invalid_not_raised(token_service: TokenService):
    result = token_service.validate_token("not-a-token")
    assert not result.is_valid
    assert result.error


def test_wrong_issuer_is_rejected(token_service: TokenService):
    token = _seal(_claims(_user(), iss="someone-else"))
    assert not token_service.validate_token(token).is_valid


def test_wrong_audience_is_rejected(token_service: TokenService):
    token = _seal(_claims(_user(), aud="another-frontend"))
    assert not token_service.validate_token(token).is_valid


def test_token_signed_with_other_algorithm_is_rejected(token_service: TokenService):
    token = _seal(_claims(_user()), algorithm="HS512")

    assert not token_service.validate_token(token).is_valid
    with pytest.raises(InvalidTokenError):
        token_service.get_principal_from_expired_token(token)


# ── Expiry ──────────────────────────────────────────────────────────
def test_expired_token_fails_validation(token_service: TokenService):
    now = int(datetime.now(timezone.utc).timestamp())
    token = _seal(_claims(_user(), iat=now - 3600, exp=now - 1800))

    result = token_service.validate_token(token)

    assert not result.is_valid
    assert result.error == "token expired"


def test_expired_token_still_identifies_holder(token_service: TokenService):
    user = _user()
    now = int(datetime.now(timezone.utc).timestamp())
    token = _seal(_claims(user, iat=now - 3600, exp=now - 1800))

    principal = token_service.get_principal_from_expired_token(token)

    assert principal.user_id == user.id


def test_long_expired_token_still_identifies_holder(token_service: TokenService):
    user = _user(UserRole.JURY)
    now = int(datetime.now(timezone.utc).timestamp())
    token = _seal(_claims(user, iat=now - 30 * 86400, exp=now - 29 * 86400))

    principal = token_service.get_principal_from_expired_token(token)

    assert principal.user_id == user.id
    assert principal.role == "JURY"
    assert principal.expires_at < datetime.now(timezone.utc)


def test_token_without_expiry_is_rejected_everywhere(token_service: TokenService):
    claims = _claims(_user())
    del claims["exp"]
    token = _seal(claims)

    assert not token_service.validate_token(token).is_valid
    with pytest.raises(InvalidTokenError):
        token_service.get_principal_from_expired_token(token)


def test_clock_skew_tolerates_recently_expired_token(token_service: TokenService):
    now = int(datetime.now(timezone.utc).timestamp())
    token = _seal(_claims(_user(), iat=now - 960, exp=now - 60))

    assert token_service.validate_token(token).is_valid


def test_expired_reader_rejects_tampered_token(token_service: TokenService):
    with pytest.raises(InvalidTokenError):
        token_service.get_principal_from_expired_token("a.b.c.d.e")
