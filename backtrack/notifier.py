# Platform notifiers - optional sinks for alerts outside the app window
from typing import Optional, Protocol

import requests

from backtrack import config
from backtrack import logger
from backtrack.models import PermissionState


class Notifier(Protocol):
    permission: PermissionState

    def request_permission(self) -> PermissionState:
        ...

    def show(self, title: str, body: str, icon: str, tag: str) -> bool:
        ...


class WebhookNotifier:
    """
    Delivers alerts as JSON to a push webhook (ntfy, gotify bridge, etc.)

    Permission is granted once requested if a URL is configured.
    """

    def __init__(self, url: Optional[str] = None, timeout: float = None,
                 session: Optional[requests.Session] = None):
        self.url = url or config.NOTIFY_WEBHOOK_URL
        self.timeout = config.NOTIFY_TIMEOUT_SECONDS if timeout is None else timeout
        self.session = session or requests.Session()
        self.permission = PermissionState.DEFAULT

    def request_permission(self) -> PermissionState:
        self.permission = PermissionState.GRANTED if self.url else PermissionState.DENIED
        logger.log_notify("Webhook Permission", {"state": self.permission.value})
        return self.permission

    def show(self, title: str, body: str, icon: str, tag: str) -> bool:
        if self.permission != PermissionState.GRANTED:
            return False
        try:
            response = self.session.post(
                self.url,
                json={"title": title, "body": body, "icon": icon, "tag": tag},
                timeout=self.timeout
            )
            response.raise_for_status()
            return True
        except requests.RequestException as e:
            logger.log_error("Webhook Delivery Failed", e, {"tag": tag})
            return False


def create_notifier() -> Optional[WebhookNotifier]:
    """A webhook notifier when NOTIFY_WEBHOOK_URL is set, otherwise None."""
    if not config.NOTIFY_WEBHOOK_URL:
        return None
    return WebhookNotifier()
