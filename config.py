import os
import secrets
from decouple import config, RepositoryEnv, Config

# Force UTF-8 reading of .env on Windows (default cp1252 breaks on special chars)
_env_path = os.path.join(os.getcwd(), ".env")
if os.path.exists(_env_path):
    try:
        _repo = RepositoryEnv(_env_path, encoding="utf-8")
        _config = Config(_repo)
    except TypeError:
        # Older python-decouple versions don't support encoding param
        _config = Config(RepositoryEnv(_env_path))
else:
    _config = config


def cfg(key, **kwargs):
    """Read config value, preferring env vars over .env file."""
    env_val = os.environ.get(key)
    if env_val is not None:
        cast = kwargs.get("cast")
        return cast(env_val) if cast else env_val
    return _config(key, **kwargs)


class Settings:
    ENV: str = cfg("ENV", default="development")
    MONGODB_URL: str = cfg("MONGODB_URL", default="mongodb://localhost:27017")
    DATABASE_NAME: str = cfg("DATABASE_NAME", default="challan_book")
    MONGODB_TIMEOUT_MS: int = cfg("MONGODB_TIMEOUT_MS", default=5000, cast=int)
    SECRET_KEY: str = cfg("SECRET_KEY", default="")
    ALGORITHM: str = cfg("ALGORITHM", default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = cfg("ACCESS_TOKEN_EXPIRE_MINUTES", default=480, cast=int)
    SESSION_COOKIE_NAME: str = cfg("SESSION_COOKIE_NAME", default="session_token")
    ALLOWED_ORIGINS: str = cfg("ALLOWED_ORIGINS", default="http://localhost:8000")
    GOOGLE_CLIENT_ID: str = cfg("GOOGLE_CLIENT_ID", default="")
    GOOGLE_CLIENT_SECRET: str = cfg("GOOGLE_CLIENT_SECRET", default="")

    def __init__(self):
        if not self.SECRET_KEY:
            # Generate a random key for development; in production, always set SECRET_KEY env var
            self.SECRET_KEY = secrets.token_urlsafe(32)
            if self.ENV == "production":
                raise RuntimeError("SECRET_KEY must be set in production. Set the SECRET_KEY environment variable.")

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"


settings = Settings()
