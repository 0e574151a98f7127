import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Literal

logger = logging.getLogger(__name__)

Severity = Literal["success", "error", "info", "warning"]


@dataclass(frozen=True)
class Notification:
    message: str = ""
    severity: Severity = "success"
    open: bool = False


class NotificationChannel:
    """Single-slot, dismissable notification shared by everything on a page.

    A new push replaces whatever is currently shown. Recent notifications are
    kept in `history` for status displays.
    """

    def __init__(self, history_size: int = 20):
        self.current = Notification()
        self._history: Deque[Notification] = deque(maxlen=history_size)

    @property
    def history(self) -> List[Notification]:
        return list(self._history)

    def push(self, message: str, severity: Severity = "info") -> Notification:
        note = Notification(message=message, severity=severity, open=True)
        self.current = note
        self._history.append(note)
        # failures are logged with their cause where they are caught
        logger.debug("%s: %s", severity, message)
        return note

    def success(self, message: str) -> Notification:
        return self.push(message, "success")

    def error(self, message: str) -> Notification:
        return self.push(message, "error")

    def dismiss(self) -> None:
        self.current = Notification(self.current.message, self.current.severity, open=False)
