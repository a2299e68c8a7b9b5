"""
SplitLedger Backend — User Service (Account Directory)
=======================================================

What:  Registration and lookup of users.
How:   Stateless service; every method receives the request's AsyncSession.
Who:   Called by the users router and by ExpenseService to validate
       creator and participant references.

Credential handling:
    Passwords are hashed with bcrypt using a fresh random salt per user
    (`bcrypt.gensalt`). Hashing runs in a worker thread so the event loop is
    not blocked for the duration of the work factor. Neither the plaintext
    nor the hash is ever logged or returned.
"""

import asyncio
import logging
import uuid
from typing import Dict, Iterable, Optional

import bcrypt
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from splitledger.config import settings
from splitledger.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    SplitLedgerError,
    ValidationError,
)
from splitledger.models.user import User
from splitledger.schemas.user import UserCreate, UserCreatedResponse, UserResponse

logger = logging.getLogger(__name__)


class UserService:
    """
    Account Directory operations.

    Responsibilities:
        - register(): validate uniqueness, hash, persist
        - get_user(): public lookup (404 when missing)
        - find_by_id() / exists() / get_users(): reference checks for the ledger
    """

    def __init__(self, rounds: Optional[int] = None):
        self._rounds = rounds

    def hash_password(self, password: str) -> str:
        """Salted bcrypt hash of `password`, as text."""
        rounds = self._rounds or settings.bcrypt_rounds
        try:
            hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
        except ValueError:
            # bcrypt refuses inputs longer than 72 bytes
            raise ValidationError(message="Password must be at most 72 bytes long", field="password")
        return hashed.decode("utf-8")

    async def register(self, db: AsyncSession, payload: UserCreate) -> UserCreatedResponse:
        """
        Register a new user.

        Raises:
            ConflictError: email or mobile number already registered
            InternalError: database failure
        """
        try:
            result = await db.execute(
                select(User.email, User.mobile_number).where(
                    or_(User.email == payload.email, User.mobile_number == payload.mobile_number)
                )
            )
            clash = result.first()
            if clash is not None:
                field = "email" if clash.email == payload.email else "mobile_number"
                logger.warning("Registration rejected: duplicate %s", field)
                raise ConflictError(field=field)

            password_hash = await asyncio.to_thread(self.hash_password, payload.password)

            user = User(
                name=payload.name,
                email=payload.email,
                mobile_number=payload.mobile_number,
                password_hash=password_hash,
            )
            db.add(user)
            await db.flush()
            logger.info("User registered: %s", user.id)

            return UserCreatedResponse(user_id=user.id)

        except SplitLedgerError:
            raise
        except IntegrityError:
            # A concurrent registration won the unique constraint
            logger.warning("Registration rejected by unique constraint")
            raise ConflictError()
        except Exception as e:
            logger.error("Unexpected error registering user: %s", str(e), exc_info=True)
            raise InternalError(context={"error_type": type(e).__name__})

    async def find_by_id(self, db: AsyncSession, user_id: uuid.UUID) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def exists(self, db: AsyncSession, user_id: uuid.UUID) -> bool:
        result = await db.execute(select(func.count(User.id)).where(User.id == user_id))
        return (result.scalar() or 0) > 0

    async def get_users(self, db: AsyncSession, user_ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, User]:
        """Batch lookup; ids that do not exist are simply absent from the dict."""
        ids = set(user_ids)
        if not ids:
            return {}
        result = await db.execute(select(User).where(User.id.in_(ids)))
        return {user.id: user for user in result.scalars().all()}

    async def get_user(self, db: AsyncSession, user_id: uuid.UUID) -> UserResponse:
        """
        Public lookup by id.

        Raises:
            NotFoundError: no such user (→ 404)
            InternalError: query failed (→ 500)
        """
        try:
            user = await self.find_by_id(db, user_id)
            if user is None:
                raise NotFoundError(resource="user", resource_id=str(user_id), message="User not found")
            return UserResponse.model_validate(user)

        except NotFoundError:
            raise
        except Exception as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise InternalError(
                message="Could not retrieve the user. Please try again.",
                context={"user_id": str(user_id)},
            )


user_service = UserService()
