class PortalError(Exception):
    """Base error carrying a message meant for the person using the page."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UploadFailedError(PortalError):
    pass


class UploadInProgressError(PortalError):
    pass


class GalleryError(PortalError):
    pass
