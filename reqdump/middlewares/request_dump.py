"""Middleware logging a diagnostic dump of every inbound request."""

import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from reqdump.adapters import HeaderSanitizer, StarletteRequestAdapter
from reqdump.config.log import get_logger
from reqdump.config.models import ConfigModel
from reqdump.observability import dump

log = get_logger(__name__)


class RequestDumpMiddleware(BaseHTTPMiddleware):
    """Log the dump of each request before handing it on.

    Nothing is read from the request when ``dump_requests`` is disabled or
    the dump level is filtered out by the logging configuration.
    """

    def __init__(self, app, config: ConfigModel):
        super().__init__(app)
        self.config = config
        self.sanitizer = HeaderSanitizer(config.redact_headers)
        self.level = getattr(logging, config.dump_log_level)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if self.config.dump_requests and log.is_enabled_for(self.level):
            adapter = await StarletteRequestAdapter.from_request(request, session_cookie=self.config.session_cookie, sanitizer=self.sanitizer)
            log.log(self.level, 'request dump', method=request.method, path=request.url.path, dump=dump(adapter))

        return await call_next(request)
