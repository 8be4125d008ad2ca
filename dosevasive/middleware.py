"""WSGI middleware that answers 403 to clients that request too fast."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from .config import EvasiveConfig
from .evasive import Evasive

_log = logging.getLogger(__name__)

_FORBIDDEN_STATUS = "403 Forbidden"
_FORBIDDEN_BODY = b"Forbidden\n"

StartResponse = Callable[..., Any]
WSGIApp = Callable[[dict, StartResponse], Iterable[bytes]]


class EvasiveMiddleware:
    """Counts requests per client address and per page, refusing floods with 403.

    Requests without a ``REMOTE_ADDR`` are passed through uncounted.
    The page is the request path, ``SCRIPT_NAME`` followed by ``PATH_INFO``,
    without the query string.
    """

    def __init__(
        self,
        app: WSGIApp,
        config: EvasiveConfig | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.app = app
        self.evasive = Evasive(config, clock)

    def __call__(self, environ: dict, start_response: StartResponse) -> Iterable[bytes]:
        ip = environ.get("REMOTE_ADDR")
        if not ip:
            return self.app(environ, start_response)

        uri = f"{environ.get('SCRIPT_NAME', '')}{environ.get('PATH_INFO', '')}" or "/"
        if self.evasive.check(ip, uri):
            return self.app(environ, start_response)

        _log.error("client denied by server configuration: %s", uri)
        start_response(
            _FORBIDDEN_STATUS,
            [
                ("Content-Type", "text/plain; charset=utf-8"),
                ("Content-Length", str(len(_FORBIDDEN_BODY))),
            ],
        )
        return [_FORBIDDEN_BODY]