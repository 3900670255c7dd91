"""
Auth service — login, registration and the refresh-token lifecycle.

Refresh token states::

    ACTIVE --refresh--> ROTATED (revoked, replaced_by_token set)
    ACTIVE --revoke---> REVOKED (revoked, no replacement)

Both end states are terminal and the rows are kept as an audit trail.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import IssuedTokens, TokenService, get_password_hash, verify_password
from app.models.refresh_token import RefreshToken
from app.models.user import User, UserRole
from app.services.soft_delete import not_deleted

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: AsyncSession, tokens: TokenService) -> None:
        self.db = db
        self.tokens = tokens

    # ── Login / registration ────────────────────────────────────────
    async def login(self, email: str, password: str, client_ip: str) -> IssuedTokens | None:
        """Return a new session, or ``None`` for bad credentials (cause is only logged)."""
        result = await self.db.execute(
            select(User).where(User.email == email, not_deleted(User))
        )
        user = result.scalar_one_or_none()
        if user is None:
            logger.info("Login failed from %s: unknown email", client_ip)
            return None
        if not verify_password(password, user.hashed_password):
            logger.info("Login failed for user %s from %s: wrong password", user.id, client_ip)
            return None

        issued = self.tokens.generate_tokens(user, client_ip)
        await self._store_refresh_token(user.id, issued)
        logger.info("User %s logged in from %s", issued.user.id, client_ip)
        return issued

    async def _store_refresh_token(self, user_id: uuid.UUID, issued: IssuedTokens) -> None:
        # Login must survive a failed write here; only refresh becomes unavailable
        try:
            self.db.add(
                RefreshToken(
                    token=issued.refresh.token,
                    user_id=user_id,
                    expires_at=issued.refresh.expires_at,
                    created_at=issued.refresh.created_at,
                )
            )
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.warning(
                "Failed to save refresh token for user %s. Login will proceed, "
                "but token refresh will be unavailable for this session.",
                user_id,
                exc_info=True,
            )

    async def register(
        self, name: str, email: str, password: str, role: UserRole
    ) -> User | None:
        """Create a user; ``None`` when the email is taken (deleted users included)."""
        existing = await self.db.execute(select(User.id).where(User.email == email))
        if existing.first() is not None:
            logger.info("Registration rejected: email already registered")
            return None

        user = User(
            name=name,
            email=email,
            hashed_password=get_password_hash(password),
            role=role,
            created_at=datetime.now(timezone.utc),
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info("Registration lost a race on a duplicate email")
            return None
        await self.db.refresh(user)
        logger.info("Registered user %s with role %s", user.id, user.role.value)
        return user

    # ── Refresh tokens ──────────────────────────────────────────────
    async def refresh_token(self, token: str, client_ip: str) -> IssuedTokens | None:
        """Rotate *token*: revoke it, link it to a new one and return a new session.

        The revoke is conditional on the row still being unrevoked, so of two
        concurrent refreshes with the same token only one can commit.
        """
        result = await self.db.execute(select(RefreshToken).where(RefreshToken.token == token))
        stored = result.scalar_one_or_none()
        if stored is None:
            logger.info("Refresh failed from %s: unknown token", client_ip)
            return None
        if stored.is_revoked:
            logger.warning(
                "Refresh failed from %s: token %s already revoked", client_ip, stored.id
            )
            return None
        if not stored.is_active():
            logger.info("Refresh failed from %s: token %s expired", client_ip, stored.id)
            return None

        user = await self.db.get(User, stored.user_id)
        if user is None or user.is_deleted:
            logger.info("Refresh failed from %s: owner of token %s is gone", client_ip, stored.id)
            return None

        # Plain values: a rollback below expires every loaded row
        token_id, owner_id = stored.id, stored.user_id
        issued = self.tokens.generate_tokens(user, client_ip)
        now = datetime.now(timezone.utc)
        try:
            revoked = await self.db.execute(
                update(RefreshToken)
                .where(RefreshToken.id == token_id, RefreshToken.is_revoked.is_(False))
                .values(
                    is_revoked=True,
                    revoked_at=now,
                    revoked_by_ip=client_ip,
                    replaced_by_token=issued.refresh.token,
                )
                .execution_options(synchronize_session=False)
            )
            if revoked.rowcount != 1:  # type: ignore[attr-defined]
                await self.db.rollback()
                logger.warning(
                    "Refresh failed from %s: token %s was rotated concurrently",
                    client_ip,
                    token_id,
                )
                return None
            self.db.add(
                RefreshToken(
                    token=issued.refresh.token,
                    user_id=owner_id,
                    expires_at=issued.refresh.expires_at,
                    created_at=issued.refresh.created_at,
                )
            )
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.error("Refresh token rotation for %s rolled back", token_id)
            raise

        logger.info("Rotated refresh token %s for user %s", token_id, owner_id)
        return issued

    async def revoke_token(self, token: str, client_ip: str) -> bool:
        result = await self.db.execute(
            update(RefreshToken)
            .where(RefreshToken.token == token, RefreshToken.is_revoked.is_(False))
            .values(
                is_revoked=True,
                revoked_at=datetime.now(timezone.utc),
                revoked_by_ip=client_ip,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:  # type: ignore[attr-defined]
            await self.db.rollback()
            logger.info("Revoke failed from %s: token unknown or already revoked", client_ip)
            return False
        await self.db.commit()
        logger.info("Refresh token revoked from %s", client_ip)
        return True

    async def get_user_by_id(self, user_id: uuid.UUID) -> User | None:
        result = await self.db.execute(
            select(User).where(User.id == user_id, not_deleted(User))
        )
        return result.scalar_one_or_none()
