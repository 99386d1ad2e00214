"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from pid_registration.adapters.cookie_store import CookieKeyValueStore
from pid_registration.api.admin import router as admin_router
from pid_registration.api.models import RegistrationPayload
from pid_registration.api.pages import (
    GROUP_PAGE,
    REGISTRATION_PAGE,
    html_value,
    page_values,
    render_page,
)
from pid_registration.app_logging import configure_logging
from pid_registration.containers import AppContainer
from pid_registration.services.registrations import (
    RegistrationForm,
    SubmissionStatus,
)
from pid_registration.services.storage import is_enrolled, toggle_theme
from pid_registration.services.validation import FormField


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.container.expiry_watcher.attach()
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    async def registration_page(request: Request) -> HTMLResponse:
        """Public sign-up form."""
        state_container: AppContainer = request.app.state.container
        return render_page(
            REGISTRATION_PAGE, **page_values(request, state_container.settings)
        )

    @app.post("/api/inscricoes")
    async def submit_registration(
        payload: RegistrationPayload, request: Request, response: Response
    ) -> dict[str, object]:
        """Validate and store a sign-up, then mark this browser enrolled."""
        state_container: AppContainer = request.app.state.container
        settings = state_container.settings
        form = RegistrationForm()
        form.change(FormField.NAME, payload.name)
        form.change(FormField.PHONE, payload.phone)
        store = CookieKeyValueStore.from_request(
            request, response, secure=settings.secure_cookies
        )
        result = state_container.registration_service.submit(form, store)
        if result.status is SubmissionStatus.SUCCESS:
            logger.info(
                "Registration stored",
                extra={"registration_id": result.registration.id},
            )
            return {
                "message": result.message,
                "redirect": result.redirect_to,
                "redirect_delay_ms": settings.notice_duration_seconds * 1000,
            }
        if result.errors:
            return JSONResponse(
                status_code=422,
                content={
                    "errors": {key.value: value for key, value in result.errors.items()}
                },
            )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"message": result.message},
        )

    @app.get("/grupo", response_class=HTMLResponse)
    async def group_page(request: Request) -> HTMLResponse:
        """Post-registration page, reachable once this browser has enrolled."""
        state_container: AppContainer = request.app.state.container
        if not is_enrolled(CookieKeyValueStore.from_request(request)):
            return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
        settings = state_container.settings
        return render_page(
            GROUP_PAGE,
            **page_values(
                request, settings, group_url=html_value(settings.group_invite_url)
            ),
        )

    @app.post("/tema")
    async def switch_theme(request: Request, response: Response) -> dict[str, str]:
        """Flip the dark/light preference."""
        state_container: AppContainer = request.app.state.container
        store = CookieKeyValueStore.from_request(
            request, response, secure=state_container.settings.secure_cookies
        )
        return {"theme": toggle_theme(store)}

    return app
