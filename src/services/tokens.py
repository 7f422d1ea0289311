"""Session token issuing and verification (signed JWTs)."""

from datetime import UTC, datetime

from jose import JWTError, jwt

from src.config import Settings
from src.services.errors import InvalidToken


class TokenService:
    """Signs and verifies session tokens with the shared app secret.

    Tokens carry only the subject id and issue time. They have no expiry
    claim; the cookie lifetime bounds them on the client side, and rotating
    ``app_secret`` invalidates every outstanding token.
    """

    def __init__(self, settings: Settings) -> None:
        if not settings.app_secret:
            raise ValueError("APP_SECRET must be configured before issuing tokens")
        self._secret = settings.app_secret
        self._algorithm = settings.jwt_algorithm

    def issue(self, subject_id: int) -> str:
        """Create a signed token bound to ``subject_id``."""
        claims = {
            "sub": str(subject_id),
            "iat": int(datetime.now(UTC).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> int:
        """Return the subject id of a valid token, raising InvalidToken otherwise."""
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as e:
            raise InvalidToken() from e

        subject = claims.get("sub")
        try:
            return int(subject)
        except (TypeError, ValueError) as e:
            raise InvalidToken() from e
