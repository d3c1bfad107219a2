"""Auth service — user registration and credential checks.

Learn: This is the only code that touches password hashes. Sign-up
stores a bcrypt hash; sign-in verifies it and hands back a signed token.
"Unknown username" and "wrong password" produce the same error and cost
one bcrypt comparison each.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from todoapp.auth.jwt import TokenService
from todoapp.auth.password import (
    DEFAULT_ROUNDS,
    burn_verification,
    hash_password,
    verify_password,
)
from todoapp.db.models import User
from todoapp.errors import ConflictError, UnauthorizedError
from todoapp.services.transaction import transaction

logger = structlog.get_logger()

INVALID_CREDENTIALS = "invalid username or password"


class AuthService:
    """Credential store plus token issuance."""

    def __init__(
        self,
        db: AsyncSession,
        tokens: TokenService,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
    ):
        self.db = db
        self.tokens = tokens
        self.bcrypt_rounds = bcrypt_rounds

    async def register(self, username: str, name: str, password: str) -> int:
        """Create a user and return its id. ConflictError if the username is taken."""
        existing = await self.db.execute(
            select(User.id).where(User.username == username)
        )
        if existing.first() is not None:
            raise ConflictError("username already exists")

        user = User(
            username=username,
            name=name,
            password_hash=hash_password(password, self.bcrypt_rounds),
        )
        async with transaction(self.db):
            self.db.add(user)
            try:
                await self.db.flush()
            except IntegrityError:
                # Lost a race with a concurrent sign-up for the same name.
                raise ConflictError("username already exists")

        logger.info("user.registered", user_id=user.id)
        return user.id

    async def verify(self, username: str, password: str) -> int:
        """Check credentials and return the user id, or raise UnauthorizedError."""
        result = await self.db.execute(select(User).where(User.username == username))
        user = result.scalars().first()

        if user is None:
            burn_verification(password, self.bcrypt_rounds)
            raise UnauthorizedError(INVALID_CREDENTIALS)
        if not verify_password(password, user.password_hash):
            raise UnauthorizedError(INVALID_CREDENTIALS)
        return user.id

    async def sign_in(self, username: str, password: str) -> str:
        """Verify credentials and issue a session token."""
        user_id = await self.verify(username, password)
        logger.info("user.signed_in", user_id=user_id)
        return self.tokens.issue(user_id)
