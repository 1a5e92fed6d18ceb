import os
import tempfile
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


class ConfigError(Exception):
    """Raised when the environment does not describe a usable configuration."""


@dataclass(frozen=True)
class Settings:
    database_url: str
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_token_expire_days: int = 30

    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    asset_timeout: float = 60.0
    asset_max_retries: int = 3
    asset_backoff_base: float = 1.0

    upload_dir: str = os.path.join(tempfile.gettempdir(), "blog-uploads")
    max_upload_bytes: int = 5 * 1024 * 1024
    posts_per_page: int = 3
    log_level: str = "INFO"


def _get_required_env(key: str) -> str:
    value = os.getenv(key)
    if not value:
        raise ConfigError(f"Required environment variable {key} is not set")
    return value


def _get_number(key: str, default, cast):
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"Environment variable {key} must be a number, got {raw!r}")


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    db_name = os.getenv("DB_NAME")
    if db_name:
        return (
            f"postgresql://{os.getenv('DB_USER')}:{os.getenv('DB_PASS')}"
            f"@{os.getenv('DB_HOST', 'localhost')}:{os.getenv('DB_PORT', '5432')}/{db_name}"
        )
    return "sqlite:///./blog.db"


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Build the process-wide settings from the environment (and ``.env``).

    Called once at startup; the result is immutable and handed to the app
    factory instead of being read from module globals.
    """
    load_dotenv(env_file)
    defaults = Settings(database_url="", jwt_secret="")

    return Settings(
        database_url=_database_url(),
        jwt_secret=_get_required_env("JWT_SECRET"),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", defaults.jwt_algorithm),
        access_token_expire_days=_get_number(
            "ACCESS_TOKEN_EXPIRE_DAYS", defaults.access_token_expire_days, int
        ),
        cloudinary_cloud_name=os.getenv("CLOUDINARY_CLOUD_NAME", ""),
        cloudinary_api_key=os.getenv("CLOUDINARY_API_KEY", ""),
        cloudinary_api_secret=os.getenv("CLOUDINARY_API_SECRET", ""),
        asset_timeout=_get_number("ASSET_TIMEOUT", defaults.asset_timeout, float),
        asset_max_retries=_get_number("ASSET_MAX_RETRIES", defaults.asset_max_retries, int),
        asset_backoff_base=_get_number("ASSET_BACKOFF_BASE", defaults.asset_backoff_base, float),
        upload_dir=os.getenv("UPLOAD_DIR", defaults.upload_dir),
        max_upload_bytes=_get_number("MAX_UPLOAD_BYTES", defaults.max_upload_bytes, int),
        posts_per_page=_get_number("POSTS_PER_PAGE", defaults.posts_per_page, int),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
    )
