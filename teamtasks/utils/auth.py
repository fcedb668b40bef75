from datetime import datetime, timedelta, UTC
from typing import Any, Dict, Mapping, Optional

import structlog
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext

from teamtasks.config import Settings
from teamtasks.errors import AuthenticationError, ValidationError

logger = structlog.get_logger(__name__)

BCRYPT_MAX_BYTES = 72


def create_token(
    data: Mapping[str, Any],
    secret: str,
    ttl: timedelta,
    algorithm: str = "HS256",
    now: Optional[datetime] = None,
) -> str:
    """Sign ``data`` plus ``iat``/``exp`` claims. The secret never goes into the token."""
    claims = dict(data)
    issued = now or datetime.now(UTC)
    expire = issued + ttl
    # JWT spec uses Unix timestamps
    claims.update({"iat": int(issued.timestamp()), "exp": int(expire.timestamp())})
    return jwt.encode(claims, secret, algorithm=algorithm)


def decode_token(token: str, secret: str, algorithm: str = "HS256") -> Dict[str, Any]:
    """Return the claims of ``token`` or raise AuthenticationError.

    Expired tokens are rejected outright; there is no refresh.
    """
    try:
        # jwt.decode validates exp automatically
        return jwt.decode(token, secret, algorithms=[algorithm], options={"require_exp": True})
    except ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except JWTError:
        raise AuthenticationError("Invalid token")


class CredentialVerifier:
    """Password hashing and session tokens, bound to the process settings."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=settings.bcrypt_rounds,
        )

    def hash_password(self, password: str) -> str:
        """Hash a password after validating bcrypt's 72-byte limit.

        Raises ValidationError if the UTF-8 encoding of the password exceeds 72 bytes.
        """
        if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValidationError("password too long: must be at most 72 bytes when UTF-8 encoded")
        return self.pwd_context.hash(password)

    def verify_password(self, plain: str, hashed: Optional[str]) -> bool:
        """Verify a plaintext password against a hash.

        Anything that is not a match, including an unusable hash, is False.
        """
        if hashed is None:
            # keep the timing of unknown accounts close to a real check
            self.pwd_context.dummy_verify()
            return False
        try:
            return self.pwd_context.verify(plain, hashed)
        except (ValueError, TypeError):
            return False

    def issue_token(
        self,
        claims: Mapping[str, Any],
        ttl: Optional[timedelta] = None,
        now: Optional[datetime] = None,
    ) -> str:
        if ttl is None:
            ttl = timedelta(minutes=self.settings.access_token_expire_minutes)
        return create_token(claims, self.settings.secret_key, ttl, self.settings.algorithm, now=now)

    def verify_token(self, token: str) -> Dict[str, Any]:
        return decode_token(token, self.settings.secret_key, self.settings.algorithm)
