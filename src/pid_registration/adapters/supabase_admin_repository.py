"""Supabase admin allow-list access."""

from dataclasses import dataclass
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from pid_registration.services.auth import AdminRepository
from pid_registration.services.errors import RemoteServiceError


@dataclass
class SupabaseAdminRepository(AdminRepository):
    """Supabase implementation for the admins table."""

    client: Client
    table_name: str = "admins"

    def is_admin(self, user_id: UUID) -> bool:
        """Return true when an admins row exists for the identity."""
        try:
            response = (
                self.client.table(self.table_name)
                .select("id")
                .eq("id", str(user_id))
                .limit(1)
                .execute()
            )
        except APIError as exc:
            raise RemoteServiceError(exc.message) from exc
        return bool(response.data)
