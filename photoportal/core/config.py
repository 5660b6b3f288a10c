import logging
import os
from pydantic import BaseModel
from typing import Optional


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Environment-driven configuration.

    Values have sensible defaults for LocalStack-based development.
    """
    aws_access_key_id: str = os.getenv("AWS_ACCESS_KEY_ID", "test")
    aws_secret_access_key: str = os.getenv("AWS_SECRET_ACCESS_KEY", "test")
    aws_region: str = os.getenv("AWS_REGION", "us-east-1")
    aws_endpoint_url: Optional[str] = os.getenv("AWS_ENDPOINT_URL")
    bucket_name: str = os.getenv("BUCKET_NAME", "poland-photos")
    table_name: str = os.getenv("TABLE_NAME", "images")
    # Prefix for public object addresses, e.g. a CDN in front of the bucket
    public_base_url: Optional[str] = os.getenv("PUBLIC_BASE_URL")
    site_title: str = os.getenv("SITE_TITLE", "Poland Trip Photo Portal")
    default_caption: str = os.getenv("DEFAULT_CAPTION", "New uploaded image")
    prefers_dark: bool = _env_flag("PREFERS_DARK")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

settings = Settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - [%(levelname)s] - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
for _noisy in ("botocore", "boto3", "urllib3", "s3transfer"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)

logger = logging.getLogger("photoportal")
logger.debug("Settings loaded: bucket=%s table=%s region=%s", settings.bucket_name, settings.table_name, settings.aws_region)
