"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from pid_registration.adapters.supabase_admin_repository import SupabaseAdminRepository
from pid_registration.adapters.supabase_auth_gateway import SupabaseAuthGateway
from pid_registration.adapters.supabase_registration_repository import (
    SupabaseRegistrationRepository,
)
from pid_registration.config import Settings
from pid_registration.services.auth import AdminAuthService
from pid_registration.services.dashboard import DashboardService
from pid_registration.services.events import AuthEventChannel
from pid_registration.services.expiry import AsyncioScheduler, SessionExpiryWatcher
from pid_registration.services.registrations import RegistrationService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    registration_service: RegistrationService
    dashboard_service: DashboardService
    auth_service: AdminAuthService
    auth_events: AuthEventChannel
    expiry_watcher: SessionExpiryWatcher
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    registration_repository = SupabaseRegistrationRepository(
        supabase_client, table_name=resolved_settings.registrations_table
    )
    admin_repository = SupabaseAdminRepository(
        supabase_client, table_name=resolved_settings.admins_table
    )
    auth_gateway = SupabaseAuthGateway.create(
        resolved_settings.supabase_url, resolved_settings.supabase_anon_key
    )
    auth_events = AuthEventChannel()
    auth_service = AdminAuthService(
        gateway=auth_gateway,
        admin_repository=admin_repository,
        events=auth_events,
        session_duration_seconds=resolved_settings.session_duration_seconds,
    )
    expiry_watcher = SessionExpiryWatcher(
        auth_service=auth_service,
        scheduler=AsyncioScheduler(),
        interval_seconds=resolved_settings.expiry_check_interval_seconds,
    )

    async def close_resources() -> None:
        expiry_watcher.close()

    return AppContainer(
        settings=resolved_settings,
        registration_service=RegistrationService(registration_repository),
        dashboard_service=DashboardService(
            registration_repository,
            display_timezone=resolved_settings.display_timezone,
        ),
        auth_service=auth_service,
        auth_events=auth_events,
        expiry_watcher=expiry_watcher,
        close_resources=close_resources,
    )
