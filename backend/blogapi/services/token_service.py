"""
Blog API — Access Token Service
================================

What:  Issues and verifies signed, expiring access tokens (HS256 JWT).
How:   The claim is {"id": <user id>, "iat": <issued>, "exp": <issued + ttl>},
       signed with a secret handed to the constructor. PyJWT recomputes the
       signature and enforces the required claims; `exp` is compared against
       the service's own clock, the same one `issue()` reads.
Who:   UserService.login() issues; AuthorizationStage verifies per request.

Rules:
    - No secret, no service: an empty secret raises ConfigurationError at
      construction, so an unsigned token can never be produced.
    - verify() reports every failure (bad signature, expired, malformed,
      missing claim) as the same UNAUTHORIZED result. The precise reason is
      only logged at DEBUG.
    - There is no refresh. An expired token means logging in again.
"""

import logging
import time
from functools import lru_cache
from typing import Callable, Optional

import jwt

from blogapi.config import settings
from blogapi.exceptions import ConfigurationError
from blogapi.results import Result

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class TokenService:
    """
    Args:
        secret:      HMAC signing key
        ttl_seconds: Lifetime of an issued token
        clock:       Returns the current UNIX time; injectable for tests
    """

    def __init__(
        self,
        secret: str,
        ttl_seconds: int = 3600,
        clock: Optional[Callable[[], float]] = None,
    ):
        if not secret:
            raise ConfigurationError(
                message="Token signing secret is not configured",
                context={"setting": "JWT_SECRET"},
            )
        self._secret = secret
        self.ttl_seconds = ttl_seconds
        self._clock = clock or time.time

    def issue(self, user_id: int) -> str:
        issued_at = int(self._clock())
        claims = {
            "id": user_id,
            "iat": issued_at,
            "exp": issued_at + self.ttl_seconds,
        }
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> Result[int]:
        """
        Checks the signature and expiry of `token`.

        Returns:
            Result carrying the user id, or the UNAUTHORIZED failure.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "iat"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError as e:
            logger.debug("Token rejected: %s", type(e).__name__)
            return Result.unauthorized()

        expires_at = claims["exp"]
        if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
            logger.debug("Token rejected: non-numeric exp claim")
            return Result.unauthorized()
        if self._clock() >= expires_at:
            logger.debug("Token rejected: expired")
            return Result.unauthorized()

        user_id = claims.get("id")
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            logger.debug("Token rejected: missing or non-integer id claim")
            return Result.unauthorized()

        return Result.success(user_id)


@lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    """
    FastAPI dependency returning the process-wide TokenService.

    Built lazily from settings on first use; raises ConfigurationError when
    JWT_SECRET is unset (startup validation normally catches that first).
    """
    return TokenService(secret=settings.jwt_secret, ttl_seconds=settings.jwt_expires_seconds)
