"""FastAPI application: entry point for the booking calendar API."""

from __future__ import annotations

import logging

import jwt
from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookings.config import Settings, get_settings
from bookings.domain.models import (
    CalendarEvent,
    EventPayload,
    LoginRequest,
    LoginResponse,
    WriteResult,
)
from bookings.repos.memory import EventRepository
from bookings.repos.sqlite import SqliteEventRepository
from bookings.services.auth import check_password, issue_token, verify_token
from bookings.services.bookings import (
    BookingService,
    DancerConflictError,
    DuplicateEventError,
    EventNotFoundError,
)

logger = logging.getLogger(__name__)

settings = get_settings()

app = FastAPI(title="Booking Calendar API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_origin_regex=settings.ALLOWED_ORIGIN_REGEX or None,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error_with_message(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Mirror ``detail`` as ``message``, the field the calendar client displays."""
    return JSONResponse(
        {"detail": exc.detail, "message": exc.detail},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


def create_event_repository(settings: Settings) -> EventRepository | SqliteEventRepository:
    if settings.STORAGE == "memory":
        return EventRepository()
    return SqliteEventRepository(settings.DATABASE_PATH)


# ── Singletons (created at import time for simplicity) ────────────────
event_repo = create_event_repository(settings)
booking_service = BookingService(event_repo)

_bearer = HTTPBearer(auto_error=False)


def require_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> dict:
    """Reject the request unless it carries a valid bearer token."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No token")
    try:
        return verify_token(credentials.credentials, settings)
    except jwt.PyJWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token"
        )


# ── Routes ────────────────────────────────────────────────────────────


@app.get("/health")
def health_check() -> dict:
    return {"status": "ok"}


@app.post("/login", response_model=LoginResponse)
def login(body: LoginRequest) -> LoginResponse:
    """Exchange the shared password for a bearer token."""
    if not check_password(body.password, settings):
        logger.warning("Rejected login attempt")
        raise HTTPException(status_code=401, detail="Wrong password")
    logger.info("Login accepted")
    return LoginResponse(token=issue_token(settings))


@app.get(
    "/events",
    response_model=list[CalendarEvent],
    dependencies=[Depends(require_token)],
)
def list_events(dancer: str | None = None) -> list[CalendarEvent]:
    """Return all events ordered by date, optionally only those of one dancer."""
    return [CalendarEvent.from_stored(e) for e in booking_service.list_events(dancer)]


@app.post(
    "/events",
    response_model=WriteResult,
    status_code=201,
    dependencies=[Depends(require_token)],
)
def create_event(payload: EventPayload) -> WriteResult:
    """Book a new event, refusing dancers already booked that day."""
    try:
        event = booking_service.create(payload)
    except DuplicateEventError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except DancerConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return WriteResult(id=event.id)


@app.put(
    "/events/{event_id}",
    response_model=WriteResult,
    dependencies=[Depends(require_token)],
)
def update_event(event_id: str, payload: EventPayload) -> WriteResult:
    """Replace an existing event; the event never conflicts with itself."""
    try:
        event = booking_service.update(event_id, payload)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    except DancerConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return WriteResult(id=event.id)


@app.delete(
    "/events/{event_id}",
    response_model=WriteResult,
    response_model_exclude_none=True,
    dependencies=[Depends(require_token)],
)
def delete_event(event_id: str) -> WriteResult:
    """Cancel a booking."""
    try:
        booking_service.delete(event_id)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    return WriteResult()


@app.get("/dancers", response_model=list[str], dependencies=[Depends(require_token)])
def list_dancers() -> list[str]:
    """Return the roster offered by the booking form."""
    return settings.DANCERS


def serve() -> None:
    """Run the API with uvicorn using the configured host, port and log level."""
    import uvicorn

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    serve()
