"""Unit tests for password hashing."""

from scribexx.kernel.identity.password import hash_password, verify_password


class TestPasswordHashing:

    def test_hash_creates_different_hashes(self):
        """Same password should create different hashes (due to salt)."""
        hash1 = hash_password("TestPassword123", rounds=4)
        hash2 = hash_password("TestPassword123", rounds=4)

        assert hash1 != hash2
        assert hash1.startswith("$2b$")

    def test_verify(self):
        hashed = hash_password("TestPassword123", rounds=4)

        assert verify_password("TestPassword123", hashed) is True
        assert verify_password("WrongPassword", hashed) is False

    def test_malformed_hash_does_not_raise(self):
        assert verify_password("TestPassword123", "not-a-bcrypt-hash") is False
