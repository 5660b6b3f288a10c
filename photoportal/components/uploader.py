import logging
import mimetypes
import time
import uuid
from dataclasses import dataclass
from pathlib import PurePath
from typing import Iterable, List, Optional
from fastapi.concurrency import run_in_threadpool
from ..aws.metadata import MetadataStore
from ..aws.storage import ObjectStore, extract_dimensions
from ..core.config import settings
from ..core.errors import UploadFailedError, UploadInProgressError
from ..core.models import ImageRecord, LocalFile
from .events import NEW_IMAGE_UPLOADED, NotificationChannel
from .previews import PreviewHandle

logger = logging.getLogger(__name__)

UPLOAD_FAILED = "Failed to upload image. Please try again."


@dataclass
class PendingUpload:
    file: LocalFile
    preview: PreviewHandle
    caption: str = ""


def object_key_for(filename: str, content_type: str) -> str:
    """Fresh unique object key that keeps the original file extension."""
    ext = PurePath(filename or "").suffix.lower()
    if not ext:
        ext = mimetypes.guess_extension(content_type or "") or ""
    return f"{uuid.uuid4().hex}{ext}"


def now_ms() -> int:
    return int(time.time() * 1000)


def is_image(file: LocalFile) -> bool:
    return (file.content_type or "").startswith("image/")


class Uploader:
    """Holds the pending set and pushes it to the stores one file at a time."""

    def __init__(
        self,
        objects: ObjectStore,
        metadata: MetadataStore,
        channel: NotificationChannel,
        default_caption: Optional[str] = None,
    ):
        self.objects = objects
        self.metadata = metadata
        self.channel = channel
        self.default_caption = default_caption or settings.default_caption
        self.pending: List[PendingUpload] = []
        self._in_flight = False

    @property
    def is_uploading(self) -> bool:
        return self._in_flight

    def accept_files(self, files: Iterable[LocalFile]) -> List[PendingUpload]:
        accepted = []
        for file in files:
            if not is_image(file):
                logger.debug("Ignoring non-image file %r (%s)", file.filename, file.content_type)
                continue
            entry = PendingUpload(file=file, preview=PreviewHandle(file))
            self.pending.append(entry)
            accepted.append(entry)
        return accepted

    def _entry(self, index: int) -> PendingUpload:
        if index < 0 or index >= len(self.pending):
            raise IndexError("not_found")
        return self.pending[index]

    def _ensure_idle(self) -> None:
        if self._in_flight:
            raise UploadInProgressError("An upload is already in progress.")

    def remove_pending(self, index: int) -> PendingUpload:
        self._ensure_idle()
        entry = self._entry(index)
        del self.pending[index]
        entry.preview.revoke()
        return entry

    def update_caption(self, index: int, text: str) -> PendingUpload:
        self._ensure_idle()
        entry = self._entry(index)
        entry.caption = text
        return entry

    async def _upload(self, entry: PendingUpload) -> ImageRecord:
        file = entry.file
        key = object_key_for(file.filename, file.content_type)
        await run_in_threadpool(self.objects.put, key, file.data, file.content_type)
        dimensions = await run_in_threadpool(extract_dimensions, file.data)
        record = ImageRecord(
            id=key,
            url=self.objects.public_url_for(key),
            caption=entry.caption or self.default_caption,
            created_at=now_ms(),
            content_type=file.content_type,
            **dimensions,
        )
        await run_in_threadpool(self.metadata.insert, record)
        return record

    async def submit_all(self) -> Optional[List[ImageRecord]]:
        """Upload every pending file in order.

        Returns None without doing anything when the pending set is empty or
        another submission is still running. Any failure stops the batch and
        raises UploadFailedError; files not yet stored stay pending.
        """
        if not self.pending or self._in_flight:
            return None

        self._in_flight = True
        batch = list(self.pending)
        uploaded: List[ImageRecord] = []
        try:
            for entry in batch:
                try:
                    record = await self._upload(entry)
                except Exception as e:
                    logger.error("Error uploading image %r: %s", entry.file.filename, e, exc_info=True)
                    raise UploadFailedError(UPLOAD_FAILED) from e
                # Inserted records leave the pending set so a retry does not duplicate them
                self.pending.remove(entry)
                entry.preview.revoke()
                uploaded.append(record)
                self.channel.broadcast(NEW_IMAGE_UPLOADED, record)
        finally:
            self._in_flight = False

        logger.info("Uploaded %d image(s)", len(uploaded))
        return uploaded
