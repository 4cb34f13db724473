import pytest

from shiftdesk.core.enums import Role
from shiftdesk.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError


def test_list_sellers_merges_auth_data(container):
    rows = container.seller_admin_service.list_sellers(current_role=Role.ADMIN)

    assert [(r["full_name"], r["email"]) for r in rows] == [
        ("Alice", "alice@example.com"),
        ("Bob", "bob@example.com"),
        ("Chloé", "chloe@example.com"),
    ]
    assert rows[0]["last_sign_in_at"] == "2026-03-01T08:00:00Z"


def test_create_seller(container, repos):
    created = container.seller_admin_service.create_seller(
        current_role=Role.ADMIN, full_name=" Dora ", email="Dora@Example.com", password="secret1"
    )

    assert created["email"] == "dora@example.com"
    profile = repos.profiles.get(created["user_id"])
    assert (profile.full_name, profile.role, profile.active) == ("Dora", Role.SELLER, True)


def test_create_seller_rolls_back_auth_user_when_profile_fails(container, repos):
    repos.profiles.fail_upsert = True

    with pytest.raises(RuntimeError):
        container.seller_admin_service.create_seller(
            current_role=Role.ADMIN, full_name="Dora", email="dora@example.com", password="secret1"
        )

    assert len(repos.gateway.deleted) == 1
    assert all(u["email"] != "dora@example.com" for u in repos.gateway.users.values())


def test_create_seller_validation(container):
    svc = container.seller_admin_service
    with pytest.raises(ValidationError):
        svc.create_seller(current_role=Role.ADMIN, full_name="Dora", email="not-an-email", password="secret1")
    with pytest.raises(ValidationError):
        svc.create_seller(current_role=Role.ADMIN, full_name="Dora", email="dora@example.com", password="123")
    with pytest.raises(AuthorizationError):
        svc.create_seller(current_role=Role.SELLER, full_name="Dora", email="dora@example.com", password="secret1")


def test_disable_seller_scrambles_password(container, repos):
    container.seller_admin_service.update_seller(current_role=Role.ADMIN, user_id="u-bob", disable=True)

    assert repos.profiles.get("u-bob").active is False
    user_id, email, password = repos.gateway.updates[-1]
    assert user_id == "u-bob"
    assert email is None
    assert password and password != "bob-pw"


def test_update_auth_needs_something(container):
    with pytest.raises(ValidationError) as exc:
        container.seller_admin_service.update_auth(current_role=Role.ADMIN, user_id="u-bob")
    assert exc.value.message == "Nothing to update"


def test_delete_seller(container, repos):
    svc = container.seller_admin_service
    svc.delete_seller(current_role=Role.ADMIN, user_id="u-bob")
    assert repos.profiles.get("u-bob").active is False
    assert repos.gateway.deleted == []

    svc.delete_seller(current_role=Role.ADMIN, user_id="u-chloe", hard_delete=True)
    assert repos.gateway.deleted == ["u-chloe"]

    with pytest.raises(NotFoundError):
        svc.delete_seller(current_role=Role.ADMIN, user_id="u-ghost")


def test_only_one_supervisor(container, repos):
    svc = container.supervisor_admin_service
    assert svc.get_supervisor(current_role=Role.ADMIN)["email"] == "tablette@example.com"

    with pytest.raises(ConflictError) as exc:
        svc.create_supervisor(current_role=Role.ADMIN, full_name="Tab 2", email="tab2@example.com", password="secret1")
    assert exc.value.message == "SUPERVISOR_EXISTS"

    svc.update_supervisor(current_role=Role.ADMIN, full_name="Caisse", password="newsecret")
    assert repos.profiles.get("u-sup").full_name == "Caisse"
    assert repos.gateway.users["u-sup"]["password"] == "newsecret"
