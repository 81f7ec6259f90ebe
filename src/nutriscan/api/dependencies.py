"""Shared request helpers for API routers."""

from zoneinfo import ZoneInfo

from fastapi import HTTPException, Request, status

from nutriscan.containers import AppContainer


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def resolve_timezone(container: AppContainer, value: str | None) -> str:
    """Return a valid IANA timezone name or reject the request."""
    timezone_name = value or container.settings.default_timezone
    if not _is_valid_timezone(timezone_name):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown timezone: {timezone_name}",
        )
    return timezone_name


def format_error(container: AppContainer, exc: Exception, fallback: str) -> str:
    """Return a user-facing error message with local debug info."""
    if container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback


def _is_valid_timezone(value: str) -> bool:
    try:
        ZoneInfo(value)
    except Exception:
        return False
    return True
