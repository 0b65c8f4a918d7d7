"""JWT Token Service."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from todo_api.errors import AuthError, AuthFailure


def _system_clock() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Issues and validates signed session tokens.

    Tokens carry ``sub`` (user id), ``iat`` and ``exp`` as epoch seconds. They are
    stateless: nothing is stored server-side and nothing can revoke a token before
    it expires.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = _system_clock,
    ) -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.ttl = ttl
        self.clock = clock

    def issue(self, subject: str) -> str:
        """Create a token for the given user id."""
        issued_at = int(self.clock().timestamp())
        payload = {
            "sub": subject,
            "iat": issued_at,
            "exp": issued_at + int(self.ttl.total_seconds()),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def validate(self, token: str) -> str:
        """Verify a token and return its subject. Raises AuthError on any failure."""
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as exc:
            raise AuthError(AuthFailure.MALFORMED_CLAIMS) from exc

        # Checked before decoding so "none" and asymmetric algorithms never reach the verifier.
        if header.get("alg") != self.algorithm:
            raise AuthError(AuthFailure.INVALID_SIGNATURE)

        try:
            claims = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_sub": False},
            )
        except JWTError as exc:
            raise AuthError(AuthFailure.INVALID_SIGNATURE) from exc

        subject = claims.get("sub")
        expires_at = claims.get("exp")
        if not isinstance(subject, str) or not subject:
            raise AuthError(AuthFailure.MALFORMED_CLAIMS)
        if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
            raise AuthError(AuthFailure.MALFORMED_CLAIMS)

        # Expired at the exact expiry instant.
        if self.clock().timestamp() >= expires_at:
            raise AuthError(AuthFailure.EXPIRED)

        return subject
