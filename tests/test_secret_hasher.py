# tests/test_secret_hasher.py

import pytest

from oauth_clients.adapters.outbound.security.id_generator import UUIDGenerator
from oauth_clients.adapters.outbound.security.secret_hasher import PasslibSecretHasher
from oauth_clients.domain.exceptions import InvalidCredentialsException


class TestPasslibSecretHasher:

    async def test_hash_is_not_plaintext_and_verifies(self, hasher):
        hashed = await hasher.hash("s3cret")

        assert hashed != "s3cret"
        assert hashed.startswith("$2b$04$")
        await hasher.compare(hashed, "s3cret")

    async def test_same_secret_hashes_differently(self, hasher):
        assert await hasher.hash("s3cret") != await hasher.hash("s3cret")

    async def test_mismatch_raises(self, hasher):
        hashed = await hasher.hash("s3cret")

        with pytest.raises(InvalidCredentialsException):
            await hasher.compare(hashed, "other")

    async def test_unreadable_hash_raises_invalid_credentials(self, hasher):
        with pytest.raises(InvalidCredentialsException):
            await hasher.compare("not-a-hash", "s3cret")

    async def test_empty_stored_secret_never_matches(self, hasher):
        with pytest.raises(InvalidCredentialsException):
            await hasher.compare("", "")

    async def test_configurable_scheme(self):
        hasher = PasslibSecretHasher(schemes=["pbkdf2_sha256"], bcrypt_rounds=4)

        hashed = await hasher.hash("s3cret")

        assert hashed.startswith("$pbkdf2-sha256$")
        await hasher.compare(hashed, "s3cret")


class TestUUIDGenerator:

    def test_ids_are_unique_and_non_empty(self):
        generator = UUIDGenerator()
        ids = {generator.new_id() for _ in range(100)}

        assert len(ids) == 100
        assert all(ids)
