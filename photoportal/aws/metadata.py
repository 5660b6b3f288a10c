from typing import Any, Dict, List
import logging
from boto3.dynamodb.conditions import Key, Attr
from botocore.exceptions import ClientError
from ..core.models import ImageRecord
from .clients import dynamodb_table as dynamodb_table_factory

"""Metadata store: one DynamoDB item per image, keyed by its object key.

Every item carries the constant `gallery` attribute so the `by_created`
index can return the whole collection ordered by `created_at`.
"""

logger = logging.getLogger(__name__)

CREATED_INDEX = "by_created"
GALLERY_PARTITION = "images"


def _to_record(item: Dict[str, Any]) -> ImageRecord:
    # DynamoDB hands numbers back as Decimal
    def _int(name):
        value = item.get(name)
        return int(value) if value is not None else None

    return ImageRecord(
        id=item["image_id"],
        url=item["url"],
        caption=item.get("caption", ""),
        created_at=_int("created_at"),
        width=_int("width"),
        height=_int("height"),
        content_type=item.get("content_type"),
    )


class MetadataStore:

    def insert(self, record: ImageRecord) -> None:
        table = dynamodb_table_factory()
        item = record.model_dump(exclude_none=True)
        item["image_id"] = item.pop("id")
        item["gallery"] = GALLERY_PARTITION
        table.put_item(Item=item, ConditionExpression=Attr("image_id").not_exists())
        logger.info("Inserted metadata for %s", record.id)

    def list_all(self) -> List[ImageRecord]:
        """Return every record, newest first."""
        table = dynamodb_table_factory()

        items: List[Dict[str, Any]] = []
        exclusive_start_key = None
        while True:
            params: Dict[str, Any] = {
                "IndexName": CREATED_INDEX,
                "KeyConditionExpression": Key("gallery").eq(GALLERY_PARTITION),
                "ScanIndexForward": False,
            }
            if exclusive_start_key is not None:
                params["ExclusiveStartKey"] = exclusive_start_key

            resp = table.query(**params)
            items.extend(resp.get("Items", []))
            exclusive_start_key = resp.get("LastEvaluatedKey")
            if not exclusive_start_key:
                break

        return [_to_record(item) for item in items]

    def update(self, image_id: str, fields: Dict[str, Any]) -> None:
        """Set the given attributes on an existing record.

        Raises KeyError("not_found") if the record is gone.
        """
        if not fields:
            raise ValueError("no_fields")
        names: Dict[str, str] = {}
        values: Dict[str, Any] = {}
        assignments = []
        for i, (name, value) in enumerate(fields.items()):
            names[f"#f{i}"] = name
            values[f":v{i}"] = value
            assignments.append(f"#f{i} = :v{i}")

        table = dynamodb_table_factory()
        try:
            table.update_item(
                Key={"image_id": image_id},
                UpdateExpression="SET " + ", ".join(assignments),
                ConditionExpression=Attr("image_id").exists(),
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                raise KeyError("not_found") from e
            raise
        logger.info("Updated %s on %s", ", ".join(fields), image_id)

    def delete(self, image_id: str) -> None:
        table = dynamodb_table_factory()
        table.delete_item(Key={"image_id": image_id})
        logger.info("Deleted metadata for %s", image_id)
