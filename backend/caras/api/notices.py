# backend/caras/api/notices.py
"""
Error bodies for the back office and public site.

Every handled failure leaves as `HTTPException(detail={"title", "description"})`,
the same shape the UI shows as a toast.
"""
from __future__ import annotations

from fastapi import HTTPException, status

from caras.services.identity import AuthError


def notice(status_code: int, title: str, description: str = "") -> HTTPException:
    return HTTPException(status_code=status_code, detail={"title": title, "description": description})


def not_found(what: str) -> HTTPException:
    return notice(status.HTTP_404_NOT_FOUND, f"{what} not found", f"No {what.lower()} with that id.")


def invalid(title: str, err: Exception) -> HTTPException:
    return notice(status.HTTP_422_UNPROCESSABLE_ENTITY, title, str(err))


def conflict(title: str, err: Exception) -> HTTPException:
    return notice(status.HTTP_409_CONFLICT, title, str(err))


def from_auth_error(err: AuthError) -> HTTPException:
    exc = notice(err.status_code, err.title, err.description)
    if err.status_code == status.HTTP_401_UNAUTHORIZED:
        exc.headers = {"WWW-Authenticate": "Bearer"}
    return exc
