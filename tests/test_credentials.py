from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from teamtasks.config import Settings
from teamtasks.errors import AuthenticationError, ValidationError
from teamtasks.utils.auth import CredentialVerifier, create_token, decode_token

SECRET = "unit-test-secret"


@pytest.fixture
def verifier():
    return CredentialVerifier(Settings(secret_key=SECRET, bcrypt_rounds=4))


def test_hash_then_verify_roundtrip(verifier):
    hashed = verifier.hash_password("s3cret!")
    assert hashed != "s3cret!"
    assert verifier.verify_password("s3cret!", hashed)
    assert not verifier.verify_password("S3cret!", hashed)


def test_same_password_hashes_differently(verifier):
    assert verifier.hash_password("same") != verifier.hash_password("same")


def test_default_cost_factor_is_ten():
    hashed = CredentialVerifier(Settings(secret_key=SECRET)).hash_password("pw")
    assert hashed.split("$")[2] == "10"


def test_verify_never_raises_on_garbage(verifier):
    assert verifier.verify_password("pw", "not-a-hash") is False
    assert verifier.verify_password("pw", None) is False
    assert verifier.verify_password("a" * 100, verifier.hash_password("pw")) is False


def test_password_over_bcrypt_limit_is_rejected(verifier):
    with pytest.raises(ValidationError) as exc:
        verifier.hash_password("a" * 100)
    assert "72" in exc.value.message


def test_token_roundtrip_keeps_claims(verifier):
    token = verifier.issue_token({"role": "user", "sub": "1"})
    claims = verifier.verify_token(token)
    assert claims["role"] == "user"
    assert claims["sub"] == "1"
    assert claims["exp"] - claims["iat"] == 3600
    assert SECRET not in token


def test_expired_token_is_rejected(verifier):
    issued = datetime.now(UTC) - timedelta(hours=2)
    token = verifier.issue_token({"role": "user"}, now=issued)
    with pytest.raises(AuthenticationError) as exc:
        verifier.verify_token(token)
    assert "expired" in exc.value.message.lower()


def test_short_ttl_expires(verifier):
    token = verifier.issue_token({"role": "user"}, ttl=timedelta(seconds=5))
    assert verifier.verify_token(token)["role"] == "user"

    issued = datetime.now(UTC) - timedelta(seconds=2)
    token = verifier.issue_token({"role": "user"}, ttl=timedelta(seconds=1), now=issued)
    with pytest.raises(AuthenticationError):
        verifier.verify_token(token)


def test_wrong_secret_and_tampering_are_rejected(verifier):
    token = create_token({"role": "user"}, "another-secret", timedelta(minutes=5))
    with pytest.raises(AuthenticationError):
        verifier.verify_token(token)

    good = verifier.issue_token({"role": "user"})
    header, payload, signature = good.split(".")
    forged = jwt.encode({"role": "admin", "exp": 9999999999}, "x", algorithm="HS256").split(".")[1]
    with pytest.raises(AuthenticationError) as exc:
        verifier.verify_token(".".join([header, forged, signature]))
    assert exc.value.message == "Invalid token"


@pytest.mark.parametrize("token", ["", "abc", "a.b.c", "Bearer x"])
def test_malformed_tokens_are_rejected(token):
    with pytest.raises(AuthenticationError):
        decode_token(token, SECRET)


def test_token_without_expiry_is_rejected():
    token = jwt.encode({"role": "user"}, SECRET, algorithm="HS256")
    with pytest.raises(AuthenticationError):
        decode_token(token, SECRET)
