from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from ..components.gallery import Gallery
from ..components.portal import PhotoPortal
from ..core.errors import PortalError
from ..core.models import CaptionUpdate, GalleryResponse, ImageRecord
from .deps import get_portal

router = APIRouter(prefix="/api/gallery", tags=["gallery"])


def _state(gallery: Gallery) -> GalleryResponse:
    return GalleryResponse(
        count=len(gallery.images),
        is_loading=gallery.is_loading,
        is_deleting=gallery.is_deleting,
        scroll_locked=gallery.scroll_locked,
        error=gallery.error,
        selected=gallery.selected,
        images=gallery.images,
    )


def _find(gallery: Gallery, image_id: str) -> ImageRecord:
    try:
        return gallery.find(image_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="not_found")


@router.get("", response_model=GalleryResponse, summary="Current gallery state")
def get_gallery(portal: PhotoPortal = Depends(get_portal)):
    return _state(portal.gallery)


@router.post(
    "/reload",
    response_model=GalleryResponse,
    summary="Refetch all images, newest first",
    description="A failed fetch leaves the list empty and sets `error`.",
)
async def reload_gallery(portal: PhotoPortal = Depends(get_portal)):
    await portal.gallery.load()
    return _state(portal.gallery)


@router.post("/close", response_model=GalleryResponse, summary="Close the lightbox")
def close_image(portal: PhotoPortal = Depends(get_portal)):
    portal.gallery.close()
    return _state(portal.gallery)


@router.post("/{image_id}/open", response_model=GalleryResponse, summary="Show an image in the lightbox")
def open_image(image_id: str, portal: PhotoPortal = Depends(get_portal)):
    portal.gallery.open(_find(portal.gallery, image_id))
    return _state(portal.gallery)


@router.delete(
    "/{image_id}",
    response_model=GalleryResponse,
    summary="Delete an image",
    description=(
        "Requires `confirm=true`. Removes the metadata record, then the stored file.\n"
        "A failure to remove the file is logged and otherwise ignored."
    ),
)
async def delete_image(
    image_id: str,
    confirm: bool = Query(False, description="Set once the user has confirmed the deletion"),
    portal: PhotoPortal = Depends(get_portal),
):
    record = _find(portal.gallery, image_id)
    try:
        deleted = await portal.gallery.remove(record, confirm=lambda _message: confirm)
    except PortalError as e:
        raise HTTPException(status_code=502, detail=e.message)
    if not deleted:
        raise HTTPException(status_code=409, detail="not_confirmed")
    return _state(portal.gallery)


@router.put("/{image_id}/caption", response_model=GalleryResponse, summary="Edit an image caption")
async def save_caption(image_id: str, body: CaptionUpdate, portal: PhotoPortal = Depends(get_portal)):
    record = _find(portal.gallery, image_id)
    try:
        await portal.gallery.save_caption(record, body.caption)
    except PortalError as e:
        raise HTTPException(status_code=502, detail=e.message)
    return _state(portal.gallery)


@router.get(
    "/{image_id}/download",
    summary="Download an image",
    description="Returns the stored bytes as an attachment named after the caption.",
)
async def download_image(image_id: str, portal: PhotoPortal = Depends(get_portal)):
    record = _find(portal.gallery, image_id)
    try:
        download = await portal.gallery.download(record)
    except PortalError as e:
        raise HTTPException(status_code=502, detail=e.message)

    headers = {"Content-Disposition": f"attachment; filename=\"{download.filename}\""}
    return Response(content=download.body, media_type=download.content_type, headers=headers)
