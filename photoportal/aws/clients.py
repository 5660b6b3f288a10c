import boto3
from ..core.config import settings


def _connection_kwargs() -> dict:
    # Read on every call so tests can repoint settings at moto
    return {
        "region_name": settings.aws_region,
        "endpoint_url": settings.aws_endpoint_url,
        "aws_access_key_id": settings.aws_access_key_id,
        "aws_secret_access_key": settings.aws_secret_access_key,
    }

def s3():
    """S3 client for the bucket holding the photo files."""
    return boto3.client("s3", **_connection_kwargs())

def dynamodb_table():
    """Handle on the DynamoDB table holding one row per photo."""
    return boto3.resource("dynamodb", **_connection_kwargs()).Table(settings.table_name)
