from typing import List, Literal
import structlog
from pydantic import BaseModel

log = structlog.get_logger(__name__)

class Notification(BaseModel):
    level: Literal["success", "error"]
    message: str

class Notifier:
    """Collects user-facing toast messages until the view drains them."""

    def __init__(self):
        self.pending: List[Notification] = []

    def success(self, message: str):
        self._push("success", message)

    def error(self, message: str):
        self._push("error", message)

    def _push(self, level: str, message: str):
        log.debug("notification", level=level, message=message)
        self.pending.append(Notification(level=level, message=message))

    def drain(self) -> List[Notification]:
        messages, self.pending = self.pending, []
        return messages
