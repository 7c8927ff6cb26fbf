"""Unit tests for password hashing and strength validation

Tests cover:
- Argon2id hashing with pepper
- Verification of correct and incorrect passwords
- Pepper configuration
- Strength policy
"""

import pytest

from skillbridge.auth.password import hash_password, verify_password, validate_password_strength


PEPPER = "test-pepper-secret-key-32-chars-long"


class TestHashPassword:
    """Test Argon2id hashing"""

    def test_hash_uses_argon2id(self, monkeypatch):
        monkeypatch.setenv('PASSWORD_PEPPER', PEPPER)

        hashed = hash_password("SecureP@ss123")

        assert hashed.startswith("$argon2id$")
        assert "m=65536,t=3,p=4" in hashed

    def test_same_password_produces_different_hashes(self, monkeypatch):
        monkeypatch.setenv('PASSWORD_PEPPER', PEPPER)

        assert hash_password("SecureP@ss123") != hash_password("SecureP@ss123")

    def test_empty_password_rejected(self, monkeypatch):
        monkeypatch.setenv('PASSWORD_PEPPER', PEPPER)

        with pytest.raises(ValueError, match="empty"):
            hash_password("")

    def test_missing_pepper_raises(self, monkeypatch):
        monkeypatch.delenv('PASSWORD_PEPPER', raising=False)

        with pytest.raises(ValueError, match="PASSWORD_PEPPER"):
            hash_password("SecureP@ss123")


class TestVerifyPassword:
    """Test password verification"""

    def test_correct_password(self, monkeypatch):
        monkeypatch.setenv('PASSWORD_PEPPER', PEPPER)
        hashed = hash_password("SecureP@ss123")

        assert verify_password("SecureP@ss123", hashed) is True

    def test_wrong_password(self, monkeypatch):
        monkeypatch.setenv('PASSWORD_PEPPER', PEPPER)
        hashed = hash_password("SecureP@ss123")

        assert verify_password("SecureP@ss124", hashed) is False

    def test_different_pepper_fails(self, monkeypatch):
        monkeypatch.setenv('PASSWORD_PEPPER', PEPPER)
        hashed = hash_password("SecureP@ss123")

        monkeypatch.setenv('PASSWORD_PEPPER', "another-pepper-value-32-chars-long")

        assert verify_password("SecureP@ss123", hashed) is False

    def test_malformed_hash(self, monkeypatch):
        monkeypatch.setenv('PASSWORD_PEPPER', PEPPER)

        assert verify_password("SecureP@ss123", "not-a-hash") is False

    def test_empty_inputs(self, monkeypatch):
        monkeypatch.setenv('PASSWORD_PEPPER', PEPPER)

        assert verify_password("", "whatever") is False
        assert verify_password("SecureP@ss123", "") is False


class TestValidatePasswordStrength:
    """Test password policy"""

    @pytest.mark.parametrize("password,fragment", [
        ("Sh0rt!", "at least 8"),
        ("lowercase1!", "uppercase"),
        ("UPPERCASE1!", "lowercase"),
        ("NoDigits!!", "digit"),
        ("NoSpecial123", "special"),
    ])
    def test_rejects_weak_passwords(self, password, fragment):
        is_valid, message = validate_password_strength(password)

        assert is_valid is False
        assert fragment in message

    def test_accepts_strong_password(self):
        assert validate_password_strength("SecureP@ss123") == (True, "")
