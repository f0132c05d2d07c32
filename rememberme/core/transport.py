# rememberme/core/transport.py
from __future__ import annotations

from datetime import datetime
from typing import Protocol

from fastapi import Request, Response


class CookieTransport(Protocol):
    """Lleva el secreto en claro entre cliente y servidor. Vive lo que dura la petición."""

    def set(
        self,
        name: str,
        value: str,
        *,
        expires_at: datetime | None,
        path: str,
        domain: str,
        secure: bool,
        http_only: bool,
    ) -> None: ...

    def get(self, name: str) -> str | None: ...

    def clear(
        self,
        name: str,
        *,
        path: str = "/",
        domain: str = "",
        secure: bool = False,
        http_only: bool = False,
    ) -> None: ...


class StarletteCookieTransport:
    """
    Cookies de una petición Starlette/FastAPI:
    - lee de Request.cookies (copiadas a una caché local de la petición)
    - escribe en la Response saliente (Set-Cookie)
    clear() borra ambas cosas, así la misma petición no vuelve a ver el valor.
    """

    def __init__(self, request: Request, response: Response):
        self.response = response
        self._cookies: dict[str, str] = dict(request.cookies)

    def set(self, name, value, *, expires_at, path, domain, secure, http_only):
        self.response.set_cookie(
            key=name,
            value=value,
            expires=expires_at,
            path=path,
            domain=domain or None,
            secure=secure,
            httponly=http_only,
        )
        self._cookies[name] = value

    def get(self, name):
        return self._cookies.get(name) or None

    def clear(self, name, *, path="/", domain="", secure=False, http_only=False):
        self._cookies.pop(name, None)
        self.response.delete_cookie(
            key=name,
            path=path,
            domain=domain or None,
            secure=secure,
            httponly=http_only,
        )
