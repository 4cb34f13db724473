import pytest

from shiftdesk.auth.model import Caller
from shiftdesk.core.enums import Role
from shiftdesk.core.exceptions import UpstreamError, ValidationError
from shiftdesk.notifications.model import PushSubscription
from shiftdesk.notifications.service import NotificationService


def _sub(endpoint, role="admin"):
    return PushSubscription(endpoint=endpoint, p256dh="p", auth="a", role=role)


def test_subscribe_stores_caller_role(container, repos):
    caller = Caller(user_id="u-admin", email="boss@example.com", role=Role.ADMIN)

    container.notification_service.subscribe(
        caller=caller, endpoint="https://push/1", keys={"p256dh": "key", "auth": "secret"}
    )

    stored = repos.push_subscriptions.rows["https://push/1"]
    assert (stored.role, stored.user_id) == ("admin", "u-admin")


def test_subscribe_requires_keys(container):
    caller = Caller(user_id="u-alice", email=None, role=Role.SELLER)
    with pytest.raises(ValidationError):
        container.notification_service.subscribe(caller=caller, endpoint="https://push/1", keys={"p256dh": "key"})


def test_broadcast_prunes_gone_subscriptions(container, repos):
    for endpoint in ("https://push/ok", "https://push/gone", "https://push/flaky"):
        repos.push_subscriptions.upsert(_sub(endpoint))
    repos.push_subscriptions.upsert(_sub("https://push/seller", role="seller"))
    repos.push_sender.failures = {"https://push/gone": 410, "https://push/flaky": 500}

    result = container.notification_service.broadcast(title="Hello", body="World", badge_count="3")

    assert result == {"sent": 1, "total": 3, "pruned": 1}
    assert "https://push/gone" not in repos.push_subscriptions.rows
    assert "https://push/flaky" in repos.push_subscriptions.rows
    assert repos.push_sender.sent == [
        ("https://push/ok", {"title": "Hello", "body": "World", "url": "/admin?tab=absences", "badgeCount": 3})
    ]


def test_broadcast_validates_role_and_badge(container):
    svc = container.notification_service
    with pytest.raises(ValidationError):
        svc.broadcast(role="planner")
    with pytest.raises(ValidationError):
        svc.broadcast(badge_count="many")


def test_unconfigured_vapid(repos):
    svc = NotificationService(repos.push_subscriptions)
    with pytest.raises(UpstreamError):
        svc.public_key
    with pytest.raises(UpstreamError):
        svc.broadcast()
    # silently skipped for request notifications
    svc.notify_role(Role.ADMIN, title="t", body="b")
