from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from reqdump.common.request_context import RequestContext
from reqdump.common.utils import generate_correlation_id
from reqdump.common.vars import set_request_context


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Attach a correlation id to the request and echo it in the response."""

    def __init__(self, app, correlation_header: str = 'X-Correlation-ID'):
        super().__init__(app)
        self.correlation_header = correlation_header

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get(self.correlation_header) or generate_correlation_id()

        context = RequestContext(correlation_id=correlation_id, path=str(request.url.path), method=request.method)

        # Store in request state for access by dependencies
        request.state.request_context = context

        set_request_context(context)
        response = await call_next(request)

        response.headers[self.correlation_header] = context.correlation_id

        return response
