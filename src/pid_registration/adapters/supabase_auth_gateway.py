"""Supabase Auth adapter."""

from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID

from supabase import AuthError, Client, ClientOptions, create_client

from pid_registration.domain.auth import AuthTokens, AuthUser
from pid_registration.services.auth import AuthGateway
from pid_registration.services.errors import RemoteServiceError


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Auth gateway that uses a fresh, non-persistent client per call.

    Each admin session has its own tokens, so no client-wide session state is
    shared between requests.
    """

    client_factory: Callable[[], Client]

    @classmethod
    def create(cls, url: str, anon_key: str) -> "SupabaseAuthGateway":
        """Create a gateway talking to the project with the public key."""

        def factory() -> Client:
            return create_client(
                url,
                anon_key,
                options=ClientOptions(persist_session=False, auto_refresh_token=False),
            )

        return cls(client_factory=factory)

    def sign_in_with_password(self, email: str, password: str) -> AuthTokens:
        """Authenticate with email and password."""
        client = self.client_factory()
        try:
            response = client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as exc:
            raise RemoteServiceError(exc.message) from exc
        if response.user is None or response.session is None:
            raise RemoteServiceError("Supabase returned no session")
        return AuthTokens(
            user=_to_user(response.user),
            access_token=response.session.access_token,
            refresh_token=response.session.refresh_token,
        )

    def get_user(self, access_token: str) -> AuthUser | None:
        """Return the user for an access token, or None when it is not live."""
        client = self.client_factory()
        try:
            response = client.auth.get_user(access_token)
        except AuthError:
            return None
        if response is None or response.user is None:
            return None
        return _to_user(response.user)

    def sign_out(self, access_token: str, refresh_token: str) -> None:
        """Revoke the given session only."""
        client = self.client_factory()
        try:
            client.auth.set_session(access_token, refresh_token)
            client.auth.sign_out({"scope": "local"})
        except AuthError as exc:
            raise RemoteServiceError(exc.message) from exc


def _to_user(user: object) -> AuthUser:
    return AuthUser(id=UUID(str(user.id)), email=getattr(user, "email", None))
