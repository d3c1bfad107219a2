"""JWT session tokens.

Learn: JWT provides stateless authentication. The token carries the
user id (``sub``), issue time and expiry, signed with a server-side key.
Nothing is stored server-side, so a token stays valid until it expires:
there is no revocation.

The key and algorithm are fixed when the TokenService is built; decoding
only ever accepts that one algorithm, which rules out ``alg: none`` and
algorithm-confusion tokens.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt
import jwt.exceptions


class TokenError(Exception):
    """Raised when token verification fails."""


class InvalidTokenError(TokenError):
    """Signature mismatch or unexpected algorithm."""


class ExpiredTokenError(TokenError):
    """The token's exp is in the past."""


class MalformedTokenError(TokenError):
    """The token or its claims cannot be decoded."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Issues and verifies signed, time-limited session tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=12),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not secret:
            raise ValueError("token signing secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl
        self._clock = clock or _utcnow

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, user_id: int) -> str:
        """Create a signed token for user_id."""
        issued_at = self._clock()
        payload = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> int:
        """Verify a token and return the user id it was issued for.

        Raises ExpiredTokenError, InvalidTokenError or MalformedTokenError.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "require": ["sub", "iat", "exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidSignatureError:
            raise InvalidTokenError("token signature is invalid")
        except jwt.InvalidAlgorithmError:
            raise InvalidTokenError("token algorithm is not allowed")
        except (
            jwt.DecodeError,
            jwt.MissingRequiredClaimError,
            jwt.exceptions.InvalidSubjectError,
        ) as e:
            raise MalformedTokenError(f"malformed token: {e}")
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"invalid token: {e}")

        # Expiry is checked against the injected clock, not PyJWT's own.
        try:
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
            user_id = int(payload["sub"])
        except (TypeError, ValueError, OverflowError):
            raise MalformedTokenError("malformed token claims")

        if self._clock() >= expires_at:
            raise ExpiredTokenError("token has expired")
        return user_id
