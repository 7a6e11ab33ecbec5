"""
Password hashing and session tokens.

JWTAuthAdapter is what the API issues sessions with. Its signing key comes
from Settings; token algorithm and password scheme come from rules.auth.
Argon2AuthAdapter only hashes, for the shell where no session is issued.
Both produce argon2 hashes, so either can verify the other's.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from jose import JWTError, jwt
from passlib.context import CryptContext

from advisornet.rules.models import AuthRules


class JWTAuthAdapter:
    def __init__(
        self,
        secret_key: str,
        token_algorithm: str = "HS256",
        password_scheme: str = "argon2",
    ) -> None:
        self.secret_key = secret_key
        self.token_algorithm = token_algorithm
        self.pwd_context = CryptContext(schemes=[password_scheme], deprecated="auto")

    @classmethod
    def from_rules(cls, secret_key: str, auth: AuthRules) -> "JWTAuthAdapter":
        return cls(
            secret_key,
            token_algorithm=auth.sessions.token_algorithm,
            password_scheme=auth.password.algorithm,
        )

    def hash_password(self, password: str) -> str:
        return str(self.pwd_context.hash(password))

    def verify_password(self, plain: str, hashed: str) -> bool:
        try:
            return bool(self.pwd_context.verify(plain, hashed))
        except ValueError:
            # Unrecognised or malformed hash
            return False

    def create_token(
        self, user_id: Any, ttl_minutes: int, now_utc: datetime | None = None
    ) -> str:
        issued = now_utc if now_utc is not None else datetime.now(UTC)
        claims = {"sub": str(user_id), "exp": issued + timedelta(minutes=ttl_minutes)}
        return str(jwt.encode(claims, self.secret_key, algorithm=self.token_algorithm))

    def decode_token(self, token: str) -> dict[str, Any] | None:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.token_algorithm])
        except JWTError:
            return None
        return cast(dict[str, Any], payload)

    def validate_token(self, token: str) -> str | None:
        payload = self.decode_token(token)
        if not payload:
            return None
        sub = payload.get("sub")
        return sub if isinstance(sub, str) else None


class Argon2AuthAdapter:
    """Password hashing only; used by the CLI where no session is issued."""

    def __init__(self) -> None:
        self.ph = PasswordHasher()

    def hash_password(self, password: str) -> str:
        return str(self.ph.hash(password))

    def verify_password(self, plain: str, hashed: str) -> bool:
        try:
            self.ph.verify(hashed, plain)
            return True
        except (VerificationError, InvalidHashError):
            return False
