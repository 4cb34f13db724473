from types import SimpleNamespace

import requests
from pywebpush import WebPushException

from shiftdesk.notifications import sender as sender_module
from shiftdesk.notifications.model import PushMessage, PushSubscription
from shiftdesk.notifications.sender import WebPushSender
from shiftdesk.notifications.service import NotificationService


def _sub(endpoint):
    return PushSubscription(endpoint=endpoint, p256dh="p", auth="a", role="admin")


def _fake_webpush(outcomes, attempted):
    def webpush(*, subscription_info, data, vapid_private_key, vapid_claims, ttl):
        endpoint = subscription_info["endpoint"]
        attempted.append(endpoint)
        outcome = outcomes.get(endpoint)
        if outcome is not None:
            raise outcome

    return webpush


def test_unreachable_host_does_not_stop_broadcast(monkeypatch, repos):
    attempted = []
    outcomes = {
        "https://push.example/dead-host": requests.ConnectionError("connection refused"),
        "https://push.example/slow": requests.Timeout("read timed out"),
        "https://push.example/gone": WebPushException("gone", response=SimpleNamespace(status_code=410)),
    }
    monkeypatch.setattr(sender_module, "webpush", _fake_webpush(outcomes, attempted))
    for endpoint in ("https://push.example/dead-host", "https://push.example/slow",
                     "https://push.example/gone", "https://push.example/ok"):
        repos.push_subscriptions.upsert(_sub(endpoint))
    svc = NotificationService(
        repos.push_subscriptions,
        WebPushSender(private_key="private", subject="mailto:boss@example.com"),
        public_key="BPUBLIC",
    )

    result = svc.broadcast(title="Nouvelle demande")

    assert result == {"sent": 1, "total": 4, "pruned": 1}
    assert len(attempted) == 4
    assert "https://push.example/dead-host" in repos.push_subscriptions.rows
    assert "https://push.example/gone" not in repos.push_subscriptions.rows


def test_send_reports_transport_error_as_zero(monkeypatch):
    attempted = []
    outcomes = {"https://push.example/dead-host": requests.ConnectionError("dns failure")}
    monkeypatch.setattr(sender_module, "webpush", _fake_webpush(outcomes, attempted))
    web_push = WebPushSender(private_key="private", subject="mailto:boss@example.com")
    message = PushMessage(title="t", body="b", url="/", badge_count=1)

    assert web_push.send(_sub("https://push.example/dead-host"), message) == 0
    assert web_push.send(_sub("https://push.example/ok"), message) is None
