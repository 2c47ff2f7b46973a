from pydantic import BaseModel, Field


class AuthSettings(BaseModel):
    """
    Login and session policy.

    Built from ApplicationConfig in production; tests construct it directly.
    """

    max_login_attempts: int = Field(default=5, ge=1)
    lockout_enabled: bool = True
    idle_timeout_seconds: float = Field(default=300, gt=0)
    temp_password_ttl_hours: int = Field(default=24, ge=1)
    min_password_length: int = Field(default=8, ge=1)
    max_password_bytes: int = Field(default=72, ge=1, le=72)

    @classmethod
    def from_config(cls, config) -> "AuthSettings":
        return cls(
            max_login_attempts=config.MAX_LOGIN_ATTEMPTS,
            lockout_enabled=config.LOCKOUT_ENABLED,
            idle_timeout_seconds=config.IDLE_TIMEOUT_SECONDS,
            temp_password_ttl_hours=config.TEMP_PASSWORD_TTL_HOURS,
            min_password_length=config.MIN_PASSWORD_LENGTH,
            max_password_bytes=config.MAX_PASSWORD_BYTES,
        )
