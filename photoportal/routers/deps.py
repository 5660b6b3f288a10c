from fastapi import Request
from ..components.portal import PhotoPortal


def get_portal(request: Request) -> PhotoPortal:
    """The page state created by the application lifespan."""
    return request.app.state.portal
