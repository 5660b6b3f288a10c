from typing import Optional
from ..aws.metadata import MetadataStore
from ..aws.storage import ObjectStore
from ..core.config import settings
from .events import NotificationChannel
from .gallery import Gallery
from .header import Header
from .uploader import Uploader


class PhotoPortal:
    """The page: header, uploader and gallery wired to one notification channel."""

    def __init__(
        self,
        objects: Optional[ObjectStore] = None,
        metadata: Optional[MetadataStore] = None,
        channel: Optional[NotificationChannel] = None,
    ):
        objects = objects or ObjectStore()
        metadata = metadata or MetadataStore()
        self.channel = channel or NotificationChannel()
        self.header = Header(settings.site_title, prefers_dark=settings.prefers_dark)
        self.uploader = Uploader(objects, metadata, self.channel, default_caption=settings.default_caption)
        self.gallery = Gallery(objects, metadata, self.channel)

    async def mount(self) -> None:
        await self.gallery.load()

    def unmount(self) -> None:
        self.gallery.close_subscription()
