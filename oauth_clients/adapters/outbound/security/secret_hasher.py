# oauth_clients/adapters/outbound/security/secret_hasher.py

"""
Secret hashing backed by passlib.

Hashing and verification are CPU-bound, so both run in a worker thread to
keep the event loop responsive.
"""

import asyncio
import logging
from typing import List, Optional

from passlib.context import CryptContext

from oauth_clients.application.ports.outbound import ISecretHasher
from oauth_clients.domain.exceptions import HashingException, InvalidCredentialsException

logger = logging.getLogger(__name__)


class PasslibSecretHasher(ISecretHasher):
    """
    Hasher for client secrets using a passlib CryptContext.
    """

    def __init__(self, schemes: Optional[List[str]] = None, bcrypt_rounds: Optional[int] = None):
        """
        Args:
            schemes: passlib scheme names, the first one is used for new hashes
            bcrypt_rounds: bcrypt cost factor (log2 of the iteration count)
        """
        schemes = schemes or ["bcrypt"]
        options = {}
        if bcrypt_rounds is not None and "bcrypt" in schemes:
            options["bcrypt__rounds"] = bcrypt_rounds
        self.crypt_context = CryptContext(schemes=schemes, deprecated="auto", **options)

    async def hash(self, plaintext: str) -> str:
        """
        Generate a secure hash of the secret for storage.

        Raises:
            HashingException: If the hash cannot be computed
        """
        try:
            return await asyncio.to_thread(self.crypt_context.hash, plaintext)
        except (ValueError, TypeError) as e:
            raise HashingException(original_error=e) from e

    async def compare(self, hashed: str, candidate: str) -> None:
        """
        Compare a plain text secret with a stored hash.

        Raises:
            InvalidCredentialsException: If the secret does not match or the
                stored hash cannot be read
        """
        try:
            matched = await asyncio.to_thread(self.crypt_context.verify, candidate, hashed)
        except (ValueError, TypeError) as e:
            logger.warning(f"Unreadable stored secret hash: {e}")
            raise InvalidCredentialsException() from e

        if not matched:
            raise InvalidCredentialsException()


if __name__ == "__main__":
    import getpass

    from oauth_clients.adapters.configuration.config import settings
    from oauth_clients.main import configure_logging

    configure_logging(settings)
    print("Client secret hash generator")
    secret = getpass.getpass("Secret to hash: ")

    hasher = PasslibSecretHasher(schemes=settings.HASH_SCHEMES, bcrypt_rounds=settings.BCRYPT_ROUNDS)
    print(asyncio.run(hasher.hash(secret)))

# Usage:
# python -m oauth_clients.adapters.outbound.security.secret_hasher
