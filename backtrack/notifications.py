# Notification Center - in-app alert list with timed dismissal and platform forwarding
from typing import Callable, List, Optional

from backtrack import config
from backtrack import logger
from backtrack.models import Notification, NotificationType, PermissionState
from backtrack.notifier import Notifier
from backtrack.utils import now_ms

PLATFORM_TYPES = (NotificationType.WARNING, NotificationType.DANGER)


class NotificationCenter:
    """
    Active notifications in display order

    Removal is two-phase: an entry is first flagged `exiting` so the UI can
    play its exit transition, then dropped after NOTIFICATION_EXIT_MS.
    Timers left behind by clear() end up removing ids that no longer exist,
    which is a no-op.
    """

    def __init__(self, scheduler, notifier: Optional[Notifier] = None,
                 clock: Callable[[], float] = now_ms):
        self.scheduler = scheduler
        self.notifier = notifier
        self._clock = clock
        self._next_id = 0
        self._notifications: List[Notification] = []
        self.permission = notifier.permission if notifier else PermissionState.DEFAULT

        if notifier is not None:
            self.scheduler.call_later(0, self._sync_permission)

    @property
    def notifications(self) -> List[Notification]:
        return list(self._notifications)

    def _sync_permission(self):
        if self.notifier is not None:
            self.permission = self.notifier.permission

    def request_permission(self) -> PermissionState:
        if self.notifier is None:
            return PermissionState.DENIED
        self.permission = self.notifier.request_permission()
        logger.log_notify("Permission Updated", {"state": self.permission.value})
        return self.permission

    def add(self, message: str, type: NotificationType = NotificationType.WARNING,
            duration: int = config.NOTIFICATION_DURATION_MS) -> int:
        self._next_id += 1
        notification_id = self._next_id
        timestamp = self._clock()

        self._notifications = self._notifications + [Notification(
            id=notification_id,
            message=message,
            type=type,
            timestamp=timestamp
        )]

        if duration > 0:
            self.scheduler.call_later(duration, lambda: self.remove(notification_id))

        if self.permission == PermissionState.GRANTED and type in PLATFORM_TYPES:
            self.send_platform_notification(message, type, notification_id, timestamp)

        return notification_id

    def remove(self, notification_id: int):
        if not any(n.id == notification_id for n in self._notifications):
            return

        self._notifications = [
            n.model_copy(update={"exiting": True}) if n.id == notification_id else n
            for n in self._notifications
        ]
        self.scheduler.call_later(config.NOTIFICATION_EXIT_MS,
                                  lambda: self._drop(notification_id))

    def _drop(self, notification_id: int):
        self._notifications = [n for n in self._notifications if n.id != notification_id]

    def clear(self):
        self._notifications = []

    def send_platform_notification(self, message: str, type: NotificationType,
                                   notification_id: int, timestamp: float) -> bool:
        """Forward to the platform notifier off the caller's thread; True when dispatched."""
        if self.notifier is None or self.permission != PermissionState.GRANTED:
            return False

        glyph = config.NOTIFICATION_GLYPHS.get(type.value, config.NOTIFICATION_GLYPHS["info"])
        # Platforms replace notifications sharing a tag; keep it unique per alert
        tag = f"{config.NOTIFICATION_TAG_PREFIX}-{int(timestamp)}-{notification_id}"

        self.scheduler.run_in_background(lambda: self.notifier.show(
            title=config.NOTIFICATION_TITLE,
            body=f"{glyph} {message}",
            icon=config.NOTIFICATION_ICON,
            tag=tag
        ))
        return True
