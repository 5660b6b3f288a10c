import logging
import re
from pathlib import PurePath
from typing import Callable, List, Optional
from fastapi.concurrency import run_in_threadpool
from ..aws.metadata import MetadataStore
from ..aws.storage import ObjectStore
from ..core.errors import GalleryError
from ..core.models import Download, ImageRecord
from .events import NEW_IMAGE_UPLOADED, NotificationChannel

logger = logging.getLogger(__name__)

FETCH_FAILED = "Failed to fetch images. Please refresh the page."
DELETE_FAILED = "Failed to delete image. Please try again."
CAPTION_FAILED = "Failed to update caption. Please try again."
DOWNLOAD_FAILED = "Failed to download image. Please try again."
CONFIRM_DELETE = "Are you sure you want to delete this image?"


def download_filename(record: ImageRecord) -> str:
    """Name to save a record's file under: the slugged caption plus the key's extension."""
    slug = re.sub(r"[^A-Za-z0-9]+", "-", record.caption or "").strip("-").lower()
    if not slug:
        return PurePath(record.id).name
    return f"{slug}{PurePath(record.id).suffix}"


class Gallery:
    """In-memory mirror of the metadata store plus lightbox state.

    The list is only refreshed by load(), upload notifications and this
    component's own edits, so it can fall behind changes made elsewhere.
    """

    def __init__(self, objects: ObjectStore, metadata: MetadataStore, channel: NotificationChannel):
        self.objects = objects
        self.metadata = metadata
        self.images: List[ImageRecord] = []
        self.selected: Optional[ImageRecord] = None
        self.is_loading = True
        self.is_deleting = False
        self.scroll_locked = False
        self.error: Optional[str] = None
        self._unsubscribe = channel.subscribe(NEW_IMAGE_UPLOADED, self.on_external_insert)

    def close_subscription(self) -> None:
        self._unsubscribe()

    def find(self, image_id: str) -> ImageRecord:
        for image in self.images:
            if image.id == image_id:
                return image
        raise KeyError("not_found")

    async def load(self) -> List[ImageRecord]:
        self.is_loading = True
        try:
            self.images = await run_in_threadpool(self.metadata.list_all)
            self.error = None
        except Exception as e:
            logger.error("Error fetching images: %s", e, exc_info=True)
            self.images = []
            self.error = FETCH_FAILED
        finally:
            self.is_loading = False
        return self.images

    def on_external_insert(self, record: ImageRecord) -> None:
        self.images = [record] + self.images

    def open(self, record: ImageRecord) -> None:
        self.selected = record
        self.scroll_locked = True

    def close(self) -> None:
        self.selected = None
        self.scroll_locked = False

    async def remove(self, record: ImageRecord, confirm: Callable[[str], bool]) -> bool:
        """Delete a record and, best-effort, its stored object.

        Returns False if the user declined the confirmation.
        """
        if not confirm(CONFIRM_DELETE):
            return False

        self.is_deleting = True
        try:
            try:
                await run_in_threadpool(self.metadata.delete, record.id)
            except Exception as e:
                logger.error("Error deleting image %s: %s", record.id, e, exc_info=True)
                raise GalleryError(DELETE_FAILED) from e

            try:
                await run_in_threadpool(self.objects.delete, record.id)
            except Exception as e:
                # The metadata row is gone, which is what the page shows
                logger.error("Storage deletion error for %s: %s", record.id, e)

            self.images = [image for image in self.images if image.id != record.id]
            if self.selected is not None and self.selected.id == record.id:
                self.close()
        finally:
            self.is_deleting = False
        return True

    async def save_caption(self, record: ImageRecord, text: str) -> ImageRecord:
        try:
            await run_in_threadpool(self.metadata.update, record.id, {"caption": text})
        except Exception as e:
            logger.error("Error updating caption for %s: %s", record.id, e, exc_info=True)
            raise GalleryError(CAPTION_FAILED) from e

        updated = record.model_copy(update={"caption": text})
        self.images = [updated if image.id == record.id else image for image in self.images]
        if self.selected is not None and self.selected.id == record.id:
            self.selected = updated
        return updated

    async def download(self, record: ImageRecord) -> Download:
        try:
            body, content_type = await run_in_threadpool(self.objects.get, record.id)
        except Exception as e:
            logger.error("Error downloading image %s: %s", record.id, e, exc_info=True)
            raise GalleryError(DOWNLOAD_FAILED) from e
        return Download(filename=download_filename(record), content_type=content_type, body=body)
