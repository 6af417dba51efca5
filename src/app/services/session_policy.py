from datetime import timedelta

from pydantic import BaseModel


class SessionPolicy(BaseModel):
    """Signing and lifetime settings injected into the session engine"""

    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "todo-auth"
    access_token_ttl: timedelta = timedelta(hours=1)
    refresh_token_ttl: timedelta = timedelta(days=7)
    extended_refresh_token_ttl: timedelta = timedelta(days=30)
    enforce_session_on_access: bool = False
    password_min_length: int = 8
    password_max_length: int = 64
    password_reset_ttl: timedelta = timedelta(minutes=30)
    email_verification_ttl: timedelta = timedelta(hours=24)

    @classmethod
    def from_config(cls, config) -> "SessionPolicy":
        return cls(
            jwt_secret=config.JWT_SECRET,
            jwt_algorithm=config.JWT_ALGORITHM,
            jwt_issuer=config.JWT_ISSUER,
            access_token_ttl=timedelta(minutes=config.ACCESS_TOKEN_TTL_MINUTES),
            refresh_token_ttl=timedelta(days=config.REFRESH_TOKEN_TTL_DAYS),
            extended_refresh_token_ttl=timedelta(
                days=config.EXTENDED_REFRESH_TOKEN_TTL_DAYS
            ),
            enforce_session_on_access=config.ENFORCE_SESSION_ON_ACCESS,
            password_min_length=config.PASSWORD_MIN_LENGTH,
            password_max_length=config.PASSWORD_MAX_LENGTH,
            password_reset_ttl=timedelta(minutes=config.PASSWORD_RESET_TTL_MINUTES),
            email_verification_ttl=timedelta(hours=config.EMAIL_VERIFICATION_TTL_HOURS),
        )

    def password_error(self, password: str):
        """Return a message when the password violates the length policy"""
        if not self.password_min_length <= len(password) <= self.password_max_length:
            return (
                f"Password must be {self.password_min_length}-"
                f"{self.password_max_length} characters"
            )
        return None
