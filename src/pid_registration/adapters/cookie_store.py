"""Cookie-backed client key-value store."""

from collections.abc import Mapping
from dataclasses import dataclass, field

from fastapi import Request, Response

from pid_registration.services.storage import KeyValueStore

_ONE_YEAR_SECONDS = 365 * 24 * 60 * 60


@dataclass
class CookieKeyValueStore(KeyValueStore):
    """Reads request cookies and writes long-lived cookies to the response."""

    cookies: Mapping[str, str]
    response: Response | None = None
    secure: bool = False
    _written: dict[str, str] = field(default_factory=dict, repr=False)

    @classmethod
    def from_request(
        cls, request: Request, response: Response | None = None, secure: bool = False
    ) -> "CookieKeyValueStore":
        return cls(cookies=request.cookies, response=response, secure=secure)

    def get(self, key: str) -> str | None:
        """Return the stored value, preferring values written this request."""
        if key in self._written:
            return self._written[key]
        return self.cookies.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value as a cookie on the outgoing response."""
        self._written[key] = value
        if self.response is not None:
            self.response.set_cookie(
                key,
                value,
                max_age=_ONE_YEAR_SECONDS,
                secure=self.secure,
                samesite="lax",
            )
