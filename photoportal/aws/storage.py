from typing import Dict, Tuple
import logging
from io import BytesIO
from botocore.exceptions import ClientError
from PIL import Image
from ..core.config import settings
from .clients import s3 as s3_client_factory

"""Object store helpers for putting, addressing, fetching and deleting image files.
"""

logger = logging.getLogger(__name__)


def extract_dimensions(data_bytes: bytes) -> Dict[str, int]:
    """Open the image and return its pixel width/height.

    Fails soft by returning an empty dict if the bytes do not parse.
    """
    try:
        with Image.open(BytesIO(data_bytes)) as img:
            width, height = img.size
    except Exception as e:
        logger.debug("Could not read image dimensions: %s", e)
        return {}
    return {"width": width, "height": height}


class ObjectStore:
    """Key-addressed binary storage backed by an S3 bucket."""

    def put(self, key: str, data_bytes: bytes, content_type: str) -> None:
        s3 = s3_client_factory()
        s3.put_object(
            Bucket=settings.bucket_name,
            Key=key,
            Body=data_bytes,
            ContentType=content_type,
        )
        logger.info("Stored object %s (%d bytes)", key, len(data_bytes))

    def public_url_for(self, key: str) -> str:
        if settings.public_base_url:
            return f"{settings.public_base_url.rstrip('/')}/{key}"
        if settings.aws_endpoint_url:
            # Path-style address for LocalStack and other custom endpoints
            return f"{settings.aws_endpoint_url.rstrip('/')}/{settings.bucket_name}/{key}"
        return f"https://{settings.bucket_name}.s3.{settings.aws_region}.amazonaws.com/{key}"

    def get(self, key: str) -> Tuple[bytes, str]:
        """Fetch an object's bytes and content type.

        Raises KeyError("not_found") when the object does not exist.
        """
        s3 = s3_client_factory()
        try:
            obj = s3.get_object(Bucket=settings.bucket_name, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in {"NoSuchKey", "404"}:
                raise KeyError("not_found") from e
            raise
        body = obj["Body"].read()
        content_type = obj.get("ContentType") or "application/octet-stream"
        return body, content_type

    def delete(self, key: str) -> None:
        s3 = s3_client_factory()
        s3.delete_object(Bucket=settings.bucket_name, Key=key)
        logger.info("Deleted object %s", key)
