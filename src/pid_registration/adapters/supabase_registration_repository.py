"""Supabase-backed registration repository."""

from dataclasses import dataclass
from datetime import datetime

from postgrest.exceptions import APIError
from supabase import Client

from pid_registration.domain.registrations import Registration
from pid_registration.services.errors import RemoteServiceError
from pid_registration.services.registrations import RegistrationRepository


@dataclass
class SupabaseRegistrationRepository(RegistrationRepository):
    """Supabase implementation for the registrations table."""

    client: Client
    table_name: str = "inscricoes"

    def create_registration(self, name: str, phone: str) -> Registration:
        """Insert a registration row and return it."""
        try:
            response = (
                self.client.table(self.table_name)
                .insert({"nome": name, "telefone": phone})
                .execute()
            )
        except APIError as exc:
            raise RemoteServiceError(exc.message) from exc
        if not response.data:
            raise RemoteServiceError("Failed to create registration in Supabase")
        return _to_registration(response.data[0])

    def list_registrations(self) -> list[Registration]:
        """Return all registrations ordered by name."""
        try:
            response = (
                self.client.table(self.table_name)
                .select("*")
                .order("nome", desc=False)
                .execute()
            )
        except APIError as exc:
            raise RemoteServiceError(exc.message) from exc
        return [_to_registration(row) for row in response.data or []]

    def update_registration(
        self, registration_id: str, name: str, phone: str
    ) -> None:
        """Update the name and phone of a registration row."""
        try:
            self.client.table(self.table_name).update(
                {"nome": name, "telefone": phone}
            ).eq("id", registration_id).execute()
        except APIError as exc:
            raise RemoteServiceError(exc.message) from exc

    def delete_registration(self, registration_id: str) -> None:
        """Delete a registration row."""
        try:
            self.client.table(self.table_name).delete().eq(
                "id", registration_id
            ).execute()
        except APIError as exc:
            raise RemoteServiceError(exc.message) from exc


def _to_registration(row: dict[str, object]) -> Registration:
    created = row.get("created_at")
    return Registration(
        id=str(row["id"]),
        name=str(row["nome"]),
        phone=str(row["telefone"]),
        created_at=(
            datetime.fromisoformat(created)
            if isinstance(created, str) and created
            else None
        ),
    )
