from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from typing import List
from ..components.portal import PhotoPortal
from ..components.uploader import Uploader
from ..core.errors import PortalError, UploadInProgressError
from ..core.models import CaptionUpdate, LocalFile, PendingListResponse, PendingView, SubmitResponse
from .deps import get_portal

router = APIRouter(prefix="/api/uploads", tags=["uploads"])


def _pending(uploader: Uploader) -> PendingListResponse:
    items = [
        PendingView(
            index=i,
            filename=entry.file.filename,
            content_type=entry.file.content_type,
            caption=entry.caption,
            preview_url=entry.preview.url,
        )
        for i, entry in enumerate(uploader.pending)
    ]
    return PendingListResponse(count=len(items), is_uploading=uploader.is_uploading, items=items)


@router.get("", response_model=PendingListResponse, summary="List pending uploads")
def list_pending(portal: PhotoPortal = Depends(get_portal)):
    return _pending(portal.uploader)


@router.post(
    "",
    response_model=PendingListResponse,
    status_code=201,
    summary="Add files to the pending set",
    description=(
        "Select or drop files using multipart form-data (field `files`, repeatable).\n"
        "Files whose content type is not `image/*` are ignored."
    ),
)
async def add_files(
    files: List[UploadFile] = File(...),
    portal: PhotoPortal = Depends(get_portal),
):
    local_files = []
    for upload in files:
        data = await upload.read()
        local_files.append(
            LocalFile(
                filename=upload.filename or "",
                content_type=upload.content_type or "application/octet-stream",
                data=data,
            )
        )
    portal.uploader.accept_files(local_files)
    return _pending(portal.uploader)


@router.delete("/{index}", response_model=PendingListResponse, summary="Remove a pending upload")
def remove_pending(index: int, portal: PhotoPortal = Depends(get_portal)):
    try:
        portal.uploader.remove_pending(index)
    except IndexError:
        raise HTTPException(status_code=404, detail="not_found")
    except UploadInProgressError:
        raise HTTPException(status_code=409, detail="upload_in_progress")
    return _pending(portal.uploader)


@router.put("/{index}/caption", response_model=PendingListResponse, summary="Caption a pending upload")
def update_caption(index: int, body: CaptionUpdate, portal: PhotoPortal = Depends(get_portal)):
    try:
        portal.uploader.update_caption(index, body.caption)
    except IndexError:
        raise HTTPException(status_code=404, detail="not_found")
    except UploadInProgressError:
        raise HTTPException(status_code=409, detail="upload_in_progress")
    return _pending(portal.uploader)


@router.post(
    "/submit",
    response_model=SubmitResponse,
    summary="Upload every pending file",
    description=(
        "Stores each pending file, records its metadata and notifies the gallery.\n"
        "Returns `submitted: false` when nothing is pending or an upload is already running."
    ),
)
async def submit_all(portal: PhotoPortal = Depends(get_portal)):
    try:
        records = await portal.uploader.submit_all()
    except PortalError as e:
        raise HTTPException(status_code=502, detail=e.message)
    if records is None:
        return SubmitResponse(submitted=False, count=0, records=[])
    return SubmitResponse(submitted=True, count=len(records), records=records)
