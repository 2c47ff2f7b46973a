import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./doctrack.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    ACCESS_TOKEN_TTL_MINUTES = int(data.get("ACCESS_TOKEN_TTL_MINUTES", 720))
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")

    # Login / session policy
    MAX_LOGIN_ATTEMPTS = int(data.get("MAX_LOGIN_ATTEMPTS", 5))
    LOCKOUT_ENABLED = bool(data.get("LOCKOUT_ENABLED", True))
    IDLE_TIMEOUT_SECONDS = float(data.get("IDLE_TIMEOUT_SECONDS", 300))
    TEMP_PASSWORD_TTL_HOURS = int(data.get("TEMP_PASSWORD_TTL_HOURS", 24))
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))
    MIN_PASSWORD_LENGTH = int(data.get("MIN_PASSWORD_LENGTH", 8))
    MAX_PASSWORD_BYTES = int(data.get("MAX_PASSWORD_BYTES", 72))
