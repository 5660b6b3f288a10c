from collections import defaultdict
from typing import Any, Callable, Dict, List
import logging

logger = logging.getLogger(__name__)

NEW_IMAGE_UPLOADED = "newImageUploaded"

Handler = Callable[[Any], None]


class NotificationChannel:
    """In-page publish/subscribe channel shared by the uploader and the gallery.

    Components are handed the same channel instance; nothing dispatches
    through module globals.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, event_name: str, handler: Handler) -> Callable[[], None]:
        self._listeners[event_name].append(handler)

        def unsubscribe() -> None:
            listeners = self._listeners.get(event_name, [])
            if handler in listeners:
                listeners.remove(handler)

        return unsubscribe

    def broadcast(self, event_name: str, payload: Any) -> None:
        # Iterate over a snapshot so a handler may unsubscribe mid-broadcast
        for handler in list(self._listeners.get(event_name, ())):
            try:
                handler(payload)
            except Exception:
                logger.exception("Listener for %s failed", event_name)
