"""
Authentication and Authorization for the MTC API.

Supports:
- Email/Password credentials hashed with bcrypt
- Self-contained JWT sessions (no server-side revocation list)
- Bearer-token authentication dependency
- Admin-only authorization dependency
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import bcrypt
import jwt
import structlog
from fastapi import Depends, HTTPException, Request
from fastapi.security import APIKeyHeader

log = structlog.get_logger()

Clock = Callable[[], datetime]

api_key_header = APIKeyHeader(name="Authorization", auto_error=False)

DEFAULT_TOKEN_TTL = timedelta(days=7)


def system_clock() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

def hash_password(password: str, *, rounds: int = 12) -> str:
    """Hash a password using bcrypt with the given cost factor."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except ValueError:
        # Malformed stored hash or a password bcrypt refuses to take.
        return False


# ---------------------------------------------------------------------------
# JWT
# ---------------------------------------------------------------------------

class TokenError(Exception):
    """Base class for token verification failures."""

    reason = "invalid"


class TokenExpiredError(TokenError):
    reason = "expired"


class TokenMalformedError(TokenError):
    reason = "malformed"


class TokenSignatureError(TokenError):
    reason = "bad_signature"


class TokenClaims:
    """Identity claims carried by a session token."""

    def __init__(self, user_id: str, email: str, is_admin: bool, expires_at: datetime):
        self.user_id = user_id
        self.email = email
        self.is_admin = is_admin
        self.expires_at = expires_at


class SessionIssuer:
    """Mints and verifies signed, time-limited identity tokens.

    The admin flag is captured when the token is issued and is not
    re-read from the user record on later requests.
    """

    def __init__(
        self,
        secret_key: str,
        *,
        algorithm: str = "HS256",
        ttl: timedelta = DEFAULT_TOKEN_TTL,
        clock: Clock = system_clock,
    ):
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.ttl = ttl
        self.clock = clock

    def issue(self, user_id: str, email: str, is_admin: bool) -> str:
        """Create a signed JWT for the given identity."""
        now = self.clock()
        payload = {
            "sub": user_id,
            "email": email,
            "is_admin": bool(is_admin),
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Decode and verify a JWT. Raises a TokenError subclass on failure."""
        try:
            # Time claims are checked below against the injected clock.
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_iat": False, "require": ["sub", "exp"]},
            )
        except jwt.InvalidSignatureError as exc:
            raise TokenSignatureError(str(exc)) from exc
        except jwt.PyJWTError as exc:
            raise TokenMalformedError(str(exc)) from exc

        try:
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
            claims = TokenClaims(
                user_id=str(payload["sub"]),
                email=str(payload.get("email", "")),
                is_admin=bool(payload.get("is_admin", False)),
                expires_at=expires_at,
            )
        except (TypeError, ValueError, OverflowError) as exc:
            raise TokenMalformedError("Token claims are malformed") from exc

        if expires_at <= self.clock():
            raise TokenExpiredError("Token has expired")
        return claims


# ---------------------------------------------------------------------------
# Authentication dependencies
# ---------------------------------------------------------------------------

class AuthenticatedUser:
    """Identity context attached to an authenticated request."""

    def __init__(self, user_id: str, email: str, is_admin: bool):
        self.user_id = user_id
        self.email = email
        self.is_admin = is_admin

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> "AuthenticatedUser":
        return cls(user_id=claims.user_id, email=claims.email, is_admin=claims.is_admin)


def get_session_issuer(request: Request) -> SessionIssuer:
    return request.app.state.context.issuer


def _extract_bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


async def get_authenticated_user(
    request: Request,
    authorization: Optional[str] = Depends(api_key_header),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> AuthenticatedUser:
    """Main authentication dependency: verifies the bearer JWT."""
    token = _extract_bearer(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Access token required")

    try:
        claims = issuer.verify(token)
    except TokenError as exc:
        log.info("auth.token_rejected", reason=exc.reason, path=request.url.path)
        raise HTTPException(status_code=403, detail="Invalid token")

    auth = AuthenticatedUser.from_claims(claims)
    request.state.auth = auth
    return auth


# ---------------------------------------------------------------------------
# Authorization dependencies
# ---------------------------------------------------------------------------

async def require_admin(
    auth: AuthenticatedUser = Depends(get_authenticated_user),
) -> AuthenticatedUser:
    """Requires the admin claim on the caller's token."""
    if not auth.is_admin:
        log.info("auth.admin_denied", user_id=auth.user_id)
        raise HTTPException(status_code=403, detail="Admin access required")
    return auth
