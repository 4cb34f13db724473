from __future__ import annotations

import json
import logging
from typing import Optional

import requests
from pywebpush import WebPushException, webpush

from .model import PushMessage, PushSubscription

log = logging.getLogger(__name__)


class WebPushSender:
    """VAPID-signed delivery through pywebpush."""

    def __init__(self, *, private_key: str, subject: str, ttl: int = 60 * 60):
        self._private_key = private_key
        self._subject = subject
        self._ttl = ttl

    def send(self, subscription: PushSubscription, message: PushMessage) -> Optional[int]:
        """Deliver one message; return None on success or the failing HTTP status.

        Transport errors (push host unreachable, timeout) report status 0 so the
        subscription is counted as not sent and kept.
        """
        try:
            webpush(
                subscription_info=subscription.subscription_info(),
                data=json.dumps(message.payload()),
                vapid_private_key=self._private_key,
                vapid_claims={"sub": self._subject},
                ttl=self._ttl,
            )
        except WebPushException as exc:
            status = exc.response.status_code if exc.response is not None else 0
            log.warning("push to %s failed (%s)", subscription.endpoint[:48], status or exc)
            return status
        except requests.RequestException as exc:
            log.warning("push to %s unreachable: %s", subscription.endpoint[:48], exc)
            return 0
        return None
