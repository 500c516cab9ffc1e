"""Echo the diagnostic dump of the calling request back as plain text."""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from reqdump.adapters import HeaderSanitizer, StarletteRequestAdapter
from reqdump.config.log import get_logger
from reqdump.config.models import ConfigModel
from reqdump.observability import dump

router = APIRouter()
log = get_logger(__name__)


def _get_config(request: Request) -> ConfigModel:
    config = getattr(getattr(request.scope.get('app'), 'state', None), 'config', None)
    return config or ConfigModel()


@router.api_route('/debug/request', methods=['GET', 'POST', 'PUT', 'DELETE', 'PATCH'], response_class=PlainTextResponse)
async def debug_request(request: Request) -> PlainTextResponse:
    config = _get_config(request)
    adapter = await StarletteRequestAdapter.from_request(request, session_cookie=config.session_cookie, sanitizer=HeaderSanitizer(config.redact_headers))
    log.debug('Dumping request for debug endpoint', method=request.method)
    return PlainTextResponse(dump(adapter))
