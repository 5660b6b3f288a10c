from dataclasses import dataclass
from typing import Optional, List
from pydantic import BaseModel


class ImageRecord(BaseModel):
    id: str
    url: str
    caption: str = ""
    created_at: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    content_type: Optional[str] = None


@dataclass
class LocalFile:
    """A file picked or dropped by the user, not yet uploaded anywhere."""
    filename: str
    content_type: str
    data: bytes


@dataclass
class Download:
    filename: str
    content_type: str
    body: bytes


class PendingView(BaseModel):
    index: int
    filename: str
    content_type: str
    caption: str
    preview_url: Optional[str] = None

class PendingListResponse(BaseModel):
    count: int
    is_uploading: bool
    items: List[PendingView]

class SubmitResponse(BaseModel):
    submitted: bool
    count: int
    records: List[ImageRecord]

class CaptionUpdate(BaseModel):
    caption: str = ""

class GalleryResponse(BaseModel):
    count: int
    is_loading: bool
    is_deleting: bool
    scroll_locked: bool
    error: Optional[str] = None
    selected: Optional[ImageRecord] = None
    images: List[ImageRecord]

class HeaderResponse(BaseModel):
    title: str
    mode: str
