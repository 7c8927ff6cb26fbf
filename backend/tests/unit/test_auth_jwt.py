"""Unit tests for JWT token generation and validation

Tests cover:
- Token creation with the expected claims
- Token decoding and validation
- Token expiration handling
- Invalid token handling
- Environment configuration
"""

import time
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from skillbridge.auth.jwt import create_access_token, decode_token


SECRET = "test-secret-key-256-bits-minimum-length-required-for-security"


class TestCreateAccessToken:
    """Test JWT token creation"""

    def test_token_has_three_segments(self, monkeypatch):
        monkeypatch.setenv('JWT_SECRET', SECRET)

        token = create_access_token(
            user_id=uuid4(),
            tenant_id=uuid4(),
            role="admin",
            email="admin@alpha.example.com",
        )

        assert isinstance(token, str)
        assert len(token.split('.')) == 3

    def test_token_contains_correct_claims(self, monkeypatch):
        monkeypatch.setenv('JWT_SECRET', SECRET)

        user_id = uuid4()
        tenant_id = uuid4()

        token = create_access_token(
            user_id=user_id,
            tenant_id=tenant_id,
            role="manager",
            email="manager@alpha.example.com",
        )

        payload = jwt.decode(token, options={"verify_signature": False})

        assert payload['sub'] == str(user_id)
        assert payload['tenant_id'] == str(tenant_id)
        assert payload['role'] == "manager"
        assert payload['email'] == "manager@alpha.example.com"
        assert 'iat' in payload
        assert 'exp' in payload

    def test_expiry_follows_environment(self, monkeypatch):
        monkeypatch.setenv('JWT_SECRET', SECRET)
        monkeypatch.setenv('JWT_EXPIRY_MINUTES', '15')

        token = create_access_token(uuid4(), uuid4(), "member", "m@alpha.example.com")
        payload = jwt.decode(token, options={"verify_signature": False})

        assert payload['exp'] - payload['iat'] == 15 * 60

    def test_invalid_expiry_falls_back_to_sixty_minutes(self, monkeypatch):
        monkeypatch.setenv('JWT_SECRET', SECRET)
        monkeypatch.setenv('JWT_EXPIRY_MINUTES', 'soon')

        token = create_access_token(uuid4(), uuid4(), "member", "m@alpha.example.com")
        payload = jwt.decode(token, options={"verify_signature": False})

        assert payload['exp'] - payload['iat'] == 60 * 60

    def test_missing_secret_raises(self, monkeypatch):
        monkeypatch.delenv('JWT_SECRET', raising=False)

        with pytest.raises(ValueError, match="JWT_SECRET"):
            create_access_token(uuid4(), uuid4(), "admin", "a@alpha.example.com")


class TestDecodeToken:
    """Test JWT token validation"""

    def test_decode_round_trip(self, monkeypatch):
        monkeypatch.setenv('JWT_SECRET', SECRET)
        user_id = uuid4()

        token = create_access_token(user_id, uuid4(), "admin", "a@alpha.example.com")

        assert decode_token(token)['sub'] == str(user_id)

    def test_expired_token_rejected(self, monkeypatch):
        monkeypatch.setenv('JWT_SECRET', SECRET)
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {
                'sub': str(uuid4()),
                'iat': int(past.timestamp()),
                'exp': int((past + timedelta(minutes=5)).timestamp()),
            },
            SECRET,
            algorithm='HS256',
        )

        with pytest.raises(jwt.ExpiredSignatureError):
            decode_token(token)

    def test_wrong_secret_rejected(self, monkeypatch):
        monkeypatch.setenv('JWT_SECRET', SECRET)
        token = jwt.encode(
            {'sub': str(uuid4()), 'exp': int(time.time()) + 600},
            'some-other-secret-that-is-long-enough-to-sign',
            algorithm='HS256',
        )

        with pytest.raises(jwt.InvalidTokenError):
            decode_token(token)

    def test_tampered_payload_rejected(self, monkeypatch):
        monkeypatch.setenv('JWT_SECRET', SECRET)
        token = create_access_token(uuid4(), uuid4(), "member", "m@alpha.example.com")

        header, payload, signature = token.split('.')
        forged = jwt.encode({'sub': str(uuid4()), 'role': 'admin'}, 'x' * 32, algorithm='HS256')
        tampered = '.'.join([header, forged.split('.')[1], signature])

        with pytest.raises(jwt.InvalidTokenError):
            decode_token(tampered)

    def test_garbage_rejected(self, monkeypatch):
        monkeypatch.setenv('JWT_SECRET', SECRET)

        with pytest.raises(jwt.InvalidTokenError):
            decode_token("not-a-token")
