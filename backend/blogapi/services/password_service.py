"""
Blog API — Password Hashing Service
====================================

What:  One-way salted password hashing and verification with bcrypt.
How:   `hash()` draws a fresh salt per call (embedded in the output), so two
       hashes of the same plaintext differ. `compare()` re-hashes with the salt
       stored in the hash and lets bcrypt do the comparison.
Who:   UserService on registration, profile update and login.

Concurrency:
    bcrypt is CPU-bound (2^rounds iterations). Both operations run
    in a worker thread via asyncio.to_thread so the event loop keeps serving
    other requests while a hash is computed.

Failure modes:
    Well-formed inputs never raise. A stored hash bcrypt cannot parse raises
    PasswordHashError, which the global handler turns into a 500.
"""

import asyncio
import logging

import bcrypt

from blogapi.config import settings
from blogapi.exceptions import PasswordHashError

logger = logging.getLogger(__name__)


class PasswordService:
    """
    bcrypt wrapper with a fixed work factor.

    Args:
        rounds: log2 of the bcrypt iteration count (default from BCRYPT_ROUNDS)
    """

    def __init__(self, rounds: int = settings.bcrypt_rounds):
        self.rounds = rounds

    def hash_sync(self, plaintext: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("utf-8")

    def compare_sync(self, plaintext: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError as e:
            logger.error("Stored password hash could not be parsed: %s", str(e))
            raise PasswordHashError(context={"error_type": type(e).__name__}) from e

    async def hash(self, plaintext: str) -> str:
        """Returns a bcrypt hash ("$2b$<rounds>$<salt><digest>") of `plaintext`."""
        return await asyncio.to_thread(self.hash_sync, plaintext)

    async def compare(self, plaintext: str, hashed: str) -> bool:
        """True when `plaintext` hashes to `hashed` under the salt embedded in it."""
        return await asyncio.to_thread(self.compare_sync, plaintext, hashed)


password_service = PasswordService()
