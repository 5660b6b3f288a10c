import base64
from typing import Optional
from ..core.models import LocalFile


class PreviewHandle:
    """Revocable inline preview for a file that has not been uploaded.

    The data URL is only built the first time it is asked for; revoking
    drops it along with the reference to the file bytes.
    """

    def __init__(self, file: LocalFile):
        self._file: Optional[LocalFile] = file
        self._data_url: Optional[str] = None
        self.revoked = False

    @property
    def url(self) -> Optional[str]:
        if self.revoked or self._file is None:
            return None
        if self._data_url is None:
            encoded = base64.b64encode(self._file.data).decode("ascii")
            self._data_url = f"data:{self._file.content_type};base64,{encoded}"
        return self._data_url

    def revoke(self) -> None:
        self.revoked = True
        self._data_url = None
        self._file = None
