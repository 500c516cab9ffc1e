"""Expose a Starlette/FastAPI request through the ``DumpableRequest`` interface."""

from __future__ import annotations

from http import cookies as http_cookies
from typing import Any, Dict, Iterable, List, Optional, Sequence

from starlette.datastructures import QueryParams
from starlette.requests import Request

from reqdump.common.interfaces import Cookie, DispatcherType

FORM_MEDIA_TYPE = 'application/x-www-form-urlencoded'
DEFAULT_PORTS = {'http': 80, 'https': 443, 'ws': 80, 'wss': 443}
SECURE_SCHEMES = {'https', 'wss'}


class HeaderSanitizer:
    """Redact sensitive header values before they are written to a dump."""

    REDACTED = '***REDACTED***'

    def __init__(self, redact_headers: Optional[List[str]] = None):
        self.sensitive_headers = {value.lower() for value in (redact_headers or [])}

    @property
    def redacts_cookies(self) -> bool:
        return 'cookie' in self.sensitive_headers

    def sanitize(self, name: str, value: Optional[str]) -> Optional[str]:
        if value is not None and name.lower() in self.sensitive_headers:
            return self.REDACTED
        return value


def _media_type(content_type: Optional[str]) -> str:
    return (content_type or '').split(';', 1)[0].strip().lower()


def _parse_cookies(headers: Iterable[str]) -> List[Cookie]:
    # Same splitting and unquoting as starlette.requests.cookie_parser, which also relies on
    # http.cookies._unquote, but duplicates are kept.
    result: List[Cookie] = []
    for header in headers:
        for chunk in header.split(';'):
            if '=' in chunk:
                name, value = chunk.split('=', 1)
            else:
                name, value = '', chunk
            name, value = name.strip(), value.strip()
            if name or value:
                result.append(Cookie(name=name, value=http_cookies._unquote(value)))
    return result


class StarletteRequestAdapter:
    """Read-only servlet style view over a Starlette ``Request``.

    Parameters are the query parameters followed by the fields of an urlencoded
    form body. The body can only be read asynchronously, so build the adapter
    with :meth:`from_request` to include form fields; the plain constructor
    only sees the query string.
    """

    def __init__(
        self,
        request: Request,
        form: Optional[QueryParams] = None,
        session_cookie: str = 'session',
        sanitizer: Optional[HeaderSanitizer] = None,
    ):
        self.request = request
        self.scope = request.scope
        self.session_cookie = session_cookie
        self.sanitizer = sanitizer or HeaderSanitizer()

        self._parameters: Dict[str, List[str]] = {}
        items = list(request.query_params.multi_items())
        if form is not None:
            items.extend(form.multi_items())
        for name, value in items:
            self._parameters.setdefault(name, []).append(value)

        self._cookies = _parse_cookies(request.headers.getlist('cookie'))

    @classmethod
    async def from_request(
        cls,
        request: Request,
        session_cookie: str = 'session',
        sanitizer: Optional[HeaderSanitizer] = None,
    ) -> 'StarletteRequestAdapter':
        """Build an adapter, reading the body when it is an urlencoded form."""
        form = None
        if _media_type(request.headers.get('content-type')) == FORM_MEDIA_TYPE:
            body = await request.body()
            form = QueryParams(body.decode('utf-8', errors='replace'))
        return cls(request, form=form, session_cookie=session_cookie, sanitizer=sanitizer)

    @property
    def _attributes(self) -> Dict[str, Any]:
        # request.state is a view over scope["state"], the ASGI key holding the values
        return self.scope.setdefault('state', {})

    # Collections

    def header_names(self) -> List[str]:
        return list(dict.fromkeys(self.request.headers.keys()))

    def get_header(self, name: str) -> Optional[str]:
        return self.sanitizer.sanitize(name, self.request.headers.get(name))

    def parameter_names(self) -> List[str]:
        return list(self._parameters)

    def get_parameter_values(self, name: str) -> Sequence[str]:
        return self._parameters.get(name, [])

    def get_cookies(self) -> List[Cookie]:
        if self.sanitizer.redacts_cookies:
            return [Cookie(name=cookie.name, value=HeaderSanitizer.REDACTED) for cookie in self._cookies]
        return list(self._cookies)

    def attribute_names(self) -> List[str]:
        return list(self._attributes)

    def get_attribute(self, name: str) -> Any:
        return self._attributes.get(name)

    # Properties

    @property
    def async_started(self) -> bool:
        return False

    @property
    def async_supported(self) -> bool:
        return True

    @property
    def auth_type(self) -> Optional[str]:
        authorization = self.request.headers.get('authorization')
        if not authorization:
            return None
        return authorization.split(' ', 1)[0].upper()

    @property
    def character_encoding(self) -> Optional[str]:
        content_type = self.content_type
        if not content_type:
            return None
        for param in content_type.split(';')[1:]:
            key, _, value = param.strip().partition('=')
            if key.lower() == 'charset':
                return value.strip('"')
        return None

    @property
    def content_length(self) -> int:
        value = self.request.headers.get('content-length', '')
        # isdigit alone accepts non-ASCII digits such as "\xb2" that int() rejects
        return int(value) if value.isascii() and value.isdigit() else -1

    @property
    def content_type(self) -> Optional[str]:
        return self.request.headers.get('content-type')

    @property
    def context_path(self) -> str:
        return self.scope.get('root_path', '')

    @property
    def dispatcher_type(self) -> DispatcherType:
        return DispatcherType.REQUEST

    @property
    def local_addr(self) -> Optional[str]:
        server = self.scope.get('server')
        return server[0] if server else None

    @property
    def local_name(self) -> Optional[str]:
        return self.local_addr

    @property
    def local_port(self) -> int:
        server = self.scope.get('server')
        if not server or server[1] is None:
            return -1
        return server[1]

    @property
    def locale(self) -> Optional[str]:
        accept_language = self.request.headers.get('accept-language')
        if not accept_language:
            return None
        tag = accept_language.split(',', 1)[0].split(';', 1)[0].strip()
        if not tag or tag == '*':
            return None
        parts = tag.split('-')
        if not parts[0]:
            return None
        if len(parts) == 1:
            return parts[0].lower()
        return f'{parts[0].lower()}_{parts[1].upper()}'

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def path_info(self) -> Optional[str]:
        path = self.scope.get('path', '')
        root_path = self.context_path
        if root_path and path.startswith(root_path):
            path = path[len(root_path):]
        return path or None

    @property
    def path_translated(self) -> Optional[str]:
        return None

    @property
    def protocol(self) -> str:
        return f"HTTP/{self.scope.get('http_version', '1.1')}"

    @property
    def query_string(self) -> Optional[str]:
        query_string = self.scope.get('query_string', b'').decode('latin-1')
        return query_string or None

    @property
    def remote_addr(self) -> Optional[str]:
        client = self.scope.get('client')
        return client[0] if client else None

    @property
    def remote_host(self) -> Optional[str]:
        return self.remote_addr

    @property
    def remote_port(self) -> int:
        client = self.scope.get('client')
        return client[1] if client else -1

    @property
    def remote_user(self) -> Optional[str]:
        user = self.scope.get('user')
        if user is None or not getattr(user, 'is_authenticated', False):
            return None
        return user.display_name

    @property
    def requested_session_id(self) -> Optional[str]:
        for cookie in self.get_cookies():
            if cookie.name == self.session_cookie:
                return cookie.value
        return None

    @property
    def requested_session_id_from_cookie(self) -> bool:
        return self.requested_session_id is not None

    @property
    def requested_session_id_from_url(self) -> bool:
        return False

    @property
    def requested_session_id_valid(self) -> bool:
        return self.requested_session_id_from_cookie and bool(self.scope.get('session'))

    @property
    def request_uri(self) -> str:
        raw_path = self.scope.get('raw_path')
        if raw_path:
            return raw_path.decode('latin-1')
        return self.scope.get('path', '')

    @property
    def scheme(self) -> str:
        return self.request.url.scheme

    @property
    def secure(self) -> bool:
        return self.scheme in SECURE_SCHEMES

    @property
    def server_name(self) -> str:
        return self.request.url.hostname or ''

    @property
    def server_port(self) -> int:
        try:
            port = self.request.url.port
        except ValueError:
            # Host header with a port that is not a number
            port = None
        return port or DEFAULT_PORTS.get(self.scheme, -1)

    @property
    def servlet_path(self) -> str:
        return ''


__all__ = ['HeaderSanitizer', 'StarletteRequestAdapter']
