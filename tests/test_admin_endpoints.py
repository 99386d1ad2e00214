"""Tests for admin endpoints."""

from uuid import uuid4

from fastapi.testclient import TestClient

from pid_registration import messages
from pid_registration.api.app import create_app
from tests.fakes import (
    FakeAuthGateway,
    FakeClock,
    FakeSupabaseClient,
    InMemoryAdminRepository,
    InMemoryRegistrationRepository,
    ManualScheduler,
)


def _register_admin(
    auth_gateway: FakeAuthGateway, admin_repository: InMemoryAdminRepository
) -> None:
    user = auth_gateway.register("admin@pid.org", "secret")
    admin_repository.admin_ids.add(user.id)


def _logged_in_client(container) -> TestClient:
    client = TestClient(create_app(container))
    response = client.post(
        "/admin/api/login", json={"email": "admin@pid.org", "password": "secret"}
    )
    assert response.status_code == 200
    return client


def test_dashboard_redirects_without_session(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/admin", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/admin/login"


def test_login_failures_share_one_generic_message(
    container,
    auth_gateway: FakeAuthGateway,
    admin_repository: InMemoryAdminRepository,
) -> None:
    _register_admin(auth_gateway, admin_repository)
    auth_gateway.register("someone@pid.org", "secret")
    client = TestClient(create_app(container))

    wrong_password = client.post(
        "/admin/api/login", json={"email": "admin@pid.org", "password": "nope"}
    )
    not_admin = client.post(
        "/admin/api/login", json={"email": "someone@pid.org", "password": "secret"}
    )

    assert wrong_password.status_code == 401
    assert not_admin.status_code == 401
    assert wrong_password.json() == not_admin.json() == {
        "message": messages.LOGIN_FAILURE
    }
    assert "pid_admin_sessao" not in client.cookies
    assert len(container.auth_service.sessions) == 0


def test_login_opens_dashboard(
    container,
    auth_gateway: FakeAuthGateway,
    admin_repository: InMemoryAdminRepository,
    scheduler: ManualScheduler,
) -> None:
    _register_admin(auth_gateway, admin_repository)
    client = TestClient(create_app(container))

    response = client.post(
        "/admin/api/login", json={"email": "admin@pid.org", "password": "secret"}
    )

    assert response.json() == {"message": messages.LOGIN_SUCCESS, "redirect": "/admin"}
    assert container.expiry_watcher.running
    assert len(scheduler.active) == 1

    dashboard = client.get("/admin", follow_redirects=False)
    assert dashboard.status_code == 200
    assert messages.LOADING_PLACEHOLDER in dashboard.text
    assert container.auth_events.subscriber_count == 1


def test_admin_api_requires_session(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/admin/api/registrations")

    assert response.status_code == 401
    assert response.json() == {"detail": "unauthenticated"}


def test_list_registrations_sorted_by_name(
    container,
    auth_gateway: FakeAuthGateway,
    admin_repository: InMemoryAdminRepository,
    registration_repository: InMemoryRegistrationRepository,
) -> None:
    _register_admin(auth_gateway, admin_repository)
    registration_repository.add("Carla", "(11) 91111-1111")
    registration_repository.add("Ana", "(11) 92222-2222")
    client = _logged_in_client(container)

    response = client.get("/admin/api/registrations")

    assert response.status_code == 200
    data = response.json()
    assert [row["name"] for row in data["registrations"]] == ["Ana", "Carla"]
    assert data["registrations"][0]["clipboard_text"] == "Ana - (11) 92222-2222"
    assert data["placeholder"] is None
    assert data["message"] == messages.REFRESH_SUCCESS


def test_list_failure_returns_bad_gateway(
    container,
    auth_gateway: FakeAuthGateway,
    admin_repository: InMemoryAdminRepository,
    registration_repository: InMemoryRegistrationRepository,
) -> None:
    _register_admin(auth_gateway, admin_repository)
    client = _logged_in_client(container)
    registration_repository.fail_with = "timeout"

    response = client.get("/admin/api/registrations")

    assert response.status_code == 502
    assert response.json() == {"message": messages.REFRESH_FAILURE}


def test_edit_registration(
    container,
    auth_gateway: FakeAuthGateway,
    admin_repository: InMemoryAdminRepository,
    registration_repository: InMemoryRegistrationRepository,
) -> None:
    _register_admin(auth_gateway, admin_repository)
    row = registration_repository.add("Ana", "(11) 92222-2222")
    client = _logged_in_client(container)

    invalid = client.put(
        f"/admin/api/registrations/{row.id}", json={"name": "A", "phone": "(11) 9"}
    )
    assert invalid.status_code == 422
    assert set(invalid.json()["errors"]) == {"name", "phone"}
    assert registration_repository.calls == []

    response = client.put(
        f"/admin/api/registrations/{row.id}",
        json={"name": "Ana Paula", "phone": "21988887777"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == messages.UPDATE_SUCCESS
    assert data["registrations"][0]["phone"] == "(21) 98888-7777"
    assert registration_repository.call_names() == ["update", "list"]


def test_delete_requires_confirmation(
    container,
    auth_gateway: FakeAuthGateway,
    admin_repository: InMemoryAdminRepository,
    registration_repository: InMemoryRegistrationRepository,
) -> None:
    _register_admin(auth_gateway, admin_repository)
    row = registration_repository.add("Ana", "(11) 92222-2222")
    client = _logged_in_client(container)

    unconfirmed = client.delete(f"/admin/api/registrations/{row.id}")
    assert unconfirmed.status_code == 400
    assert unconfirmed.json() == {"message": messages.DELETE_NOT_CONFIRMED}
    assert registration_repository.calls == []

    response = client.delete(
        f"/admin/api/registrations/{row.id}", params={"confirmed": "true"}
    )
    assert response.status_code == 200
    assert response.json()["registrations"] == []
    assert response.json()["placeholder"] == messages.EMPTY_PLACEHOLDER


def test_delete_failure_returns_bad_gateway(
    container,
    auth_gateway: FakeAuthGateway,
    admin_repository: InMemoryAdminRepository,
    registration_repository: InMemoryRegistrationRepository,
) -> None:
    _register_admin(auth_gateway, admin_repository)
    client = _logged_in_client(container)
    registration_repository.fail_with = "timeout"

    response = client.delete(
        f"/admin/api/registrations/{uuid4()}", params={"confirmed": "true"}
    )

    assert response.status_code == 502
    assert response.json() == {"message": messages.DELETE_FAILURE}


def test_expired_session_is_signed_out_and_announced(
    container,
    auth_gateway: FakeAuthGateway,
    admin_repository: InMemoryAdminRepository,
    scheduler: ManualScheduler,
    clock: FakeClock,
) -> None:
    _register_admin(auth_gateway, admin_repository)
    client = _logged_in_client(container)
    assert client.get("/admin/api/session").json() == {
        "authenticated": True,
        "expires_in_seconds": 3600,
    }

    clock.advance(3601)
    scheduler.tick()

    assert len(container.auth_service.sessions) == 0
    assert not container.expiry_watcher.running
    expired = client.get("/admin/api/session")
    assert expired.status_code == 401
    assert expired.json() == {"detail": "session_expired"}
    assert client.get("/admin", follow_redirects=False).status_code == 303


def test_login_page_announces_expiry_once(
    container,
    auth_gateway: FakeAuthGateway,
    admin_repository: InMemoryAdminRepository,
    scheduler: ManualScheduler,
    clock: FakeClock,
) -> None:
    _register_admin(auth_gateway, admin_repository)
    client = _logged_in_client(container)

    clock.advance(3600)
    scheduler.tick()
    first = client.get("/admin/login")
    second = client.get("/admin/login")

    assert "if (true)" in first.text
    assert "if (false)" in second.text


def test_logout(
    container,
    auth_gateway: FakeAuthGateway,
    admin_repository: InMemoryAdminRepository,
) -> None:
    _register_admin(auth_gateway, admin_repository)
    client = _logged_in_client(container)

    response = client.post("/admin/api/logout")

    assert response.json() == {
        "message": messages.LOGOUT_SUCCESS,
        "redirect": "/admin/login",
    }
    assert len(container.auth_service.sessions) == 0
    assert len(auth_gateway.sign_outs) == 1
    assert client.get("/admin", follow_redirects=False).status_code == 303


def test_logout_failure_keeps_session(
    container,
    auth_gateway: FakeAuthGateway,
    admin_repository: InMemoryAdminRepository,
) -> None:
    _register_admin(auth_gateway, admin_repository)
    client = _logged_in_client(container)
    auth_gateway.fail_sign_out = True

    response = client.post("/admin/api/logout")

    assert response.status_code == 502
    assert response.json() == {"message": messages.LOGOUT_FAILURE}
    assert len(container.auth_service.sessions) == 1


def test_edit_and_delete_with_integer_backend_ids(
    supabase_container,
    supabase_client: FakeSupabaseClient,
    auth_gateway: FakeAuthGateway,
    admin_repository: InMemoryAdminRepository,
) -> None:
    _register_admin(auth_gateway, admin_repository)
    table = supabase_client.table("inscricoes")
    table.queue(
        "select", [{"id": 42, "nome": "Ana Paula", "telefone": "(21) 98888-7777"}]
    )
    client = _logged_in_client(supabase_container)

    edited = client.put(
        "/admin/api/registrations/42",
        json={"name": "Ana Paula", "phone": "21988887777"},
    )
    deleted = client.delete(
        "/admin/api/registrations/42", params={"confirmed": "true"}
    )

    assert edited.status_code == 200
    assert edited.json()["registrations"][0]["id"] == "42"
    assert deleted.status_code == 200
    assert deleted.json()["registrations"] == []
    assert table.last_filters == [("id", "42"), ("id", "42")]
