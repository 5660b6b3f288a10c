import os, sys
from io import BytesIO

import boto3
import pytest
from moto import mock_aws
from PIL import Image

# Ensure project root on sys.path so `import photoportal...` works without installing
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from photoportal.core.config import settings
from photoportal.core.models import ImageRecord, LocalFile


def png_bytes(size=(2, 2), color=(255, 0, 0)) -> bytes:
    img = Image.new("RGB", size, color=color)
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def jpeg_bytes(size=(4, 3), color=(0, 128, 255)) -> bytes:
    img = Image.new("RGB", size, color=color)
    buf = BytesIO()
    img.save(buf, format="JPEG")
    return buf.getvalue()


def create_resources():
    s3 = boto3.client("s3", region_name=settings.aws_region)
    s3.create_bucket(Bucket=settings.bucket_name)

    dynamodb = boto3.client("dynamodb", region_name=settings.aws_region)
    dynamodb.create_table(
        TableName=settings.table_name,
        AttributeDefinitions=[
            {"AttributeName": "image_id", "AttributeType": "S"},
            {"AttributeName": "gallery", "AttributeType": "S"},
            {"AttributeName": "created_at", "AttributeType": "N"},
        ],
        KeySchema=[{"AttributeName": "image_id", "KeyType": "HASH"}],
        BillingMode="PAY_PER_REQUEST",
        GlobalSecondaryIndexes=[
            {
                "IndexName": "by_created",
                "KeySchema": [
                    {"AttributeName": "gallery", "KeyType": "HASH"},
                    {"AttributeName": "created_at", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            }
        ],
    )


@pytest.fixture
def aws_mock(monkeypatch):
    with mock_aws():
        # Ensure our clients do not try to hit a custom endpoint in tests
        monkeypatch.setattr(settings, "aws_endpoint_url", None)
        monkeypatch.setattr(settings, "public_base_url", None)
        monkeypatch.setattr(settings, "aws_region", "us-east-1")
        monkeypatch.setattr(settings, "bucket_name", "test-bucket")
        monkeypatch.setattr(settings, "table_name", "Images")
        create_resources()
        yield


class FakeObjectStore:
    """In-memory object store; set `fail_on` to an operation name to make it raise."""

    def __init__(self):
        self.objects = {}
        self.fail_on = set()

    def _check(self, op):
        if op in self.fail_on:
            raise RuntimeError(f"{op} failed")

    def put(self, key, data_bytes, content_type):
        self._check("put")
        self.objects[key] = (data_bytes, content_type)

    def public_url_for(self, key):
        return f"https://cdn.example.test/{key}"

    def get(self, key):
        self._check("get")
        if key not in self.objects:
            raise KeyError("not_found")
        return self.objects[key]

    def delete(self, key):
        self._check("delete")
        self.objects.pop(key, None)


class FakeMetadataStore:
    def __init__(self):
        self.rows = {}
        self.fail_on = set()

    def _check(self, op):
        if op in self.fail_on:
            raise RuntimeError(f"{op} failed")

    def insert(self, record):
        self._check("insert")
        self.rows[record.id] = record

    def list_all(self):
        self._check("list_all")
        return sorted(self.rows.values(), key=lambda r: r.created_at or 0, reverse=True)

    def update(self, image_id, fields):
        self._check("update")
        if image_id not in self.rows:
            raise KeyError("not_found")
        self.rows[image_id] = self.rows[image_id].model_copy(update=fields)

    def delete(self, image_id):
        self._check("delete")
        self.rows.pop(image_id, None)


@pytest.fixture
def fake_objects():
    return FakeObjectStore()


@pytest.fixture
def fake_metadata():
    return FakeMetadataStore()


@pytest.fixture
def make_record():
    def _make(image_id, created_at, caption="c"):
        return ImageRecord(
            id=image_id,
            url=f"https://cdn.example.test/{image_id}",
            caption=caption,
            created_at=created_at,
        )
    return _make


@pytest.fixture
def image_file():
    def _make(filename="a.png", content_type="image/png", data=None):
        return LocalFile(filename=filename, content_type=content_type, data=data if data is not None else png_bytes())
    return _make
