"""
Cookie Token Store — the persisted token as an HTTP cookie (aiohttp).

Bound to one request/response pair: reads come from the incoming request
cookies, writes and removals are set on the outgoing response. Pending
changes are visible to later reads of the same store instance.
"""
from typing import Optional

from aiohttp import web

from .abstract import AbstractTokenStore

_REMOVED = object()


class CookieTokenStore(AbstractTokenStore):
    """Token store reading ``request.cookies`` and writing ``Set-Cookie``."""

    def __init__(
        self,
        request: web.BaseRequest,
        response: web.StreamResponse,
        path: str = "/",
        secure: bool = False,
    ) -> None:
        self._request = request
        self._response = response
        self._cookie_path = path
        self._secure = secure
        self._pending: dict[str, object] = {}

    @property
    def response(self) -> web.StreamResponse:
        return self._response

    async def _read(self, name: str) -> Optional[str]:
        if name in self._pending:
            value = self._pending[name]
            return None if value is _REMOVED else value
        return self._request.cookies.get(name) or None

    async def _write(self, name: str, value: str, max_age: int) -> None:
        self._response.set_cookie(
            name,
            value,
            max_age=max_age,
            path=self._cookie_path,
            secure=self._secure,
            httponly=True,
            samesite="Strict",
        )
        self._pending[name] = value

    async def _remove(self, name: str) -> None:
        self._response.del_cookie(name, path=self._cookie_path)
        self._pending[name] = _REMOVED
