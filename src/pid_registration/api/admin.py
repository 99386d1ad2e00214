"""Admin login, dashboard and registration management endpoints."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from pid_registration import messages
from pid_registration.api.models import (  # noqa: TC001
    LoginPayload,
    RegistrationUpdatePayload,
)
from pid_registration.api.pages import (
    DASHBOARD_PAGE,
    LOGIN_PAGE,
    html_value,
    js_value,
    page_values,
    render_page,
)
from pid_registration.domain.auth import AdminSession  # noqa: TC001
from pid_registration.services.auth import AdminGuard, GuardState
from pid_registration.services.dashboard import DashboardView
from pid_registration.services.errors import (
    AccessDeniedError,
    ConfirmationRequiredError,
    InvalidRegistrationError,
    RemoteServiceError,
)

if TYPE_CHECKING:
    from pid_registration.containers import AppContainer

ADMIN_SESSION_COOKIE = "pid_admin_sessao"
LOGIN_PATH = "/admin/login"
DASHBOARD_PATH = "/admin"

router = APIRouter(prefix="/admin", tags=["admin"])
logger = logging.getLogger(__name__)


def _container(request: Request) -> AppContainer:
    return request.app.state.container


async def admin_guard(request: Request) -> AsyncIterator[AdminGuard]:
    """Resolve the admin session for a page and release it afterwards."""
    guard = AdminGuard(
        auth_service=_container(request).auth_service,
        session_id=request.cookies.get(ADMIN_SESSION_COOKIE),
    )
    guard.start()
    try:
        yield guard
    finally:
        guard.close()


async def require_admin_session(request: Request) -> AdminSession:
    """Ensure API requests carry a live, unexpired admin session."""
    auth_service = _container(request).auth_service
    session_id = request.cookies.get(ADMIN_SESSION_COOKIE)
    session = auth_service.current_session(session_id) if session_id else None
    if session is None:
        expired = bool(session_id) and auth_service.consume_expiry_notice(session_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="session_expired" if expired else "unauthenticated",
        )
    return session


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request) -> HTMLResponse:
    """Login form; announces a forced sign-out once."""
    container = _container(request)
    session_id = request.cookies.get(ADMIN_SESSION_COOKIE)
    expired = bool(session_id) and container.auth_service.consume_expiry_notice(
        session_id
    )
    response = render_page(
        LOGIN_PAGE,
        **page_values(request, container.settings, session_expired=js_value(expired)),
    )
    if expired:
        response.delete_cookie(ADMIN_SESSION_COOKIE)
    return response


@router.post("/api/login")
async def login(
    payload: LoginPayload, request: Request, response: Response
) -> dict[str, str]:
    """Authenticate, then authorize against the admin allow-list."""
    container = _container(request)
    try:
        session = container.auth_service.login(payload.email, payload.password)
    except AccessDeniedError:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"message": messages.LOGIN_FAILURE},
        )
    response.set_cookie(
        ADMIN_SESSION_COOKIE,
        session.id,
        max_age=container.settings.session_duration_seconds,
        httponly=True,
        secure=container.settings.secure_cookies,
        samesite="lax",
    )
    return {"message": messages.LOGIN_SUCCESS, "redirect": DASHBOARD_PATH}


@router.post("/api/logout")
async def logout(request: Request, response: Response) -> dict[str, str]:
    """Sign out the current admin session."""
    container = _container(request)
    session_id = request.cookies.get(ADMIN_SESSION_COOKIE)
    if session_id:
        try:
            container.auth_service.logout(session_id)
        except RemoteServiceError:
            logger.exception("Admin sign-out failed")
            return JSONResponse(
                status_code=status.HTTP_502_BAD_GATEWAY,
                content={"message": messages.LOGOUT_FAILURE},
            )
    response.delete_cookie(ADMIN_SESSION_COOKIE)
    return {"message": messages.LOGOUT_SUCCESS, "redirect": LOGIN_PATH}


@router.get("", response_class=HTMLResponse)
async def dashboard_page(
    request: Request, guard: AdminGuard = Depends(admin_guard)
) -> HTMLResponse:
    """Dashboard shell; rows are loaded by the page script."""
    if guard.state is not GuardState.AUTHENTICATED:
        return RedirectResponse(LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)
    container = _container(request)
    return render_page(
        DASHBOARD_PAGE,
        **page_values(
            request,
            container.settings,
            loading=html_value(messages.LOADING_PLACEHOLDER),
            check_interval_ms=js_value(
                container.settings.expiry_check_interval_seconds * 1000
            ),
        ),
    )


@router.get("/api/session")
async def session_status(
    request: Request, session: AdminSession = Depends(require_admin_session)
) -> dict[str, object]:
    """Report the remaining lifetime of the admin session."""
    auth_service = _container(request).auth_service
    return {
        "authenticated": True,
        "expires_in_seconds": auth_service.remaining_seconds(session),
    }


@router.get("/api/registrations", dependencies=[Depends(require_admin_session)])
async def list_registrations(request: Request) -> dict[str, object]:
    """Return every registration ordered by name."""
    dashboard = _container(request).dashboard_service
    view = DashboardView()
    try:
        dashboard.refresh(view)
    except RemoteServiceError:
        logger.exception("Failed to load registrations")
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"message": messages.REFRESH_FAILURE},
        )
    return {**dashboard.serialize(view), "message": messages.REFRESH_SUCCESS}


@router.put(
    "/api/registrations/{registration_id}",
    dependencies=[Depends(require_admin_session)],
)
async def update_registration(
    registration_id: str, payload: RegistrationUpdatePayload, request: Request
) -> dict[str, object]:
    """Save an inline edit and return the re-fetched list."""
    dashboard = _container(request).dashboard_service
    view = DashboardView()
    try:
        dashboard.save_edit(view, registration_id, payload.name, payload.phone)
    except InvalidRegistrationError as exc:
        return JSONResponse(
            status_code=422,
            content={"errors": {key.value: value for key, value in exc.errors.items()}},
        )
    except RemoteServiceError:
        logger.exception(
            "Failed to update registration",
            extra={"registration_id": registration_id},
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"message": messages.UPDATE_FAILURE},
        )
    return {**dashboard.serialize(view), "message": messages.UPDATE_SUCCESS}


@router.delete(
    "/api/registrations/{registration_id}",
    dependencies=[Depends(require_admin_session)],
)
async def delete_registration(
    registration_id: str, request: Request, confirmed: bool = False
) -> dict[str, object]:
    """Delete a confirmed registration and return the re-fetched list."""
    dashboard = _container(request).dashboard_service
    view = DashboardView()
    try:
        dashboard.delete(view, registration_id, confirmed=confirmed)
    except ConfirmationRequiredError:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": messages.DELETE_NOT_CONFIRMED},
        )
    except RemoteServiceError:
        logger.exception(
            "Failed to delete registration",
            extra={"registration_id": registration_id},
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"message": messages.DELETE_FAILURE},
        )
    return {**dashboard.serialize(view), "message": messages.DELETE_SUCCESS}
