from fastapi import APIRouter, Depends
from ..components.portal import PhotoPortal
from ..core.models import HeaderResponse
from .deps import get_portal

router = APIRouter(prefix="/api/header", tags=["header"])


@router.get("", response_model=HeaderResponse, summary="Site title and display mode")
def get_header(portal: PhotoPortal = Depends(get_portal)):
    return HeaderResponse(title=portal.header.title, mode=portal.header.mode)


@router.post("/toggle", response_model=HeaderResponse, summary="Switch between light and dark mode")
def toggle_mode(portal: PhotoPortal = Depends(get_portal)):
    portal.header.toggle()
    return HeaderResponse(title=portal.header.title, mode=portal.header.mode)
