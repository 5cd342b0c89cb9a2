"""
Actor identity from bearer tokens.

Tokens are issued by the external auth service (HS256, shared secret). Claims used here:
sub (user id) and role (user | owner | admin). issue_token exists for scripts and tests.
"""
import time
from dataclasses import dataclass

import jwt

from turfbook.core.constants import ROLE_ADMIN, ROLE_OWNER, ROLE_USER

_KNOWN_ROLES = (ROLE_USER, ROLE_OWNER, ROLE_ADMIN)
_DEFAULT_TTL_SECONDS = 7 * 24 * 3600


@dataclass(frozen=True)
class Actor:
    user_id: str
    role: str = ROLE_USER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_owner(self) -> bool:
        return self.role == ROLE_OWNER


class InvalidToken(Exception):
    pass


def decode_token(token: str, secret: str, algorithm: str = "HS256") -> Actor:
    """Decode and validate a bearer token. Raises InvalidToken on any problem."""
    try:
        claims = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.PyJWTError as e:
        raise InvalidToken(str(e)) from e
    user_id = str(claims.get("sub") or "").strip()
    if not user_id:
        raise InvalidToken("token has no subject")
    role = claims.get("role") or ROLE_USER
    if role not in _KNOWN_ROLES:
        raise InvalidToken(f"unknown role {role!r}")
    return Actor(user_id=user_id, role=role)


def issue_token(
    user_id: str,
    role: str,
    secret: str,
    algorithm: str = "HS256",
    ttl_seconds: int = _DEFAULT_TTL_SECONDS,
) -> str:
    now = int(time.time())
    return jwt.encode(
        {"sub": user_id, "role": role, "iat": now, "exp": now + ttl_seconds},
        secret,
        algorithm=algorithm,
    )
