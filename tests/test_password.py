"""
Tests for bcrypt password hashing.
"""

from auth.password import hash_password, verify_password


class TestPasswordHashing:
    def test_same_password_hashes_differently(self):
        first = hash_password("secret1", rounds=4)
        second = hash_password("secret1", rounds=4)

        assert first != second
        assert verify_password("secret1", first)
        assert verify_password("secret1", second)

    def test_hash_is_not_plaintext(self):
        digest = hash_password("secret1", rounds=4)
        assert "secret1" not in digest
        assert digest.startswith("$2")

    def test_wrong_password_returns_false(self):
        digest = hash_password("secret1", rounds=4)
        assert verify_password("secret2", digest) is False

    def test_malformed_digest_returns_false(self):
        assert verify_password("secret1", "not-a-bcrypt-hash") is False
        assert verify_password("secret1", "") is False

    def test_password_longer_than_72_bytes(self):
        password = "p" * 100
        digest = hash_password(password, rounds=4)

        assert verify_password(password, digest)
        assert verify_password("p" * 72, digest)
        assert not verify_password("p" * 71, digest)
