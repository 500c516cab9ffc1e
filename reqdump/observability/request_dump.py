"""Text dumps of an inbound request for diagnostic logging.

The report lists, in this order, the request headers, parameters, cookies and
attributes (each sorted by name and omitted when empty) followed by a fixed
block of protocol level properties::

    Header: 
    accept                         = */*
    host                           = localhost:8000

    Properties:
    asyncStarted                   = false
    ...
"""

from __future__ import annotations

from operator import attrgetter
from typing import Any, Callable, Iterable, List, Optional, Tuple, TypeVar

from reqdump.common.interfaces import DumpableRequest
from reqdump.common.text import to_display_text
from reqdump.observability.exceptions import InvalidArgumentError

T = TypeVar('T')

NAME_WIDTH = 30

HEADER_LABEL = 'Header: '
PARAMETER_LABEL = 'Parameter:'
COOKIES_LABEL = 'Cookies: '
ATTRIBUTES_LABEL = 'Attributes: '
PROPERTIES_LABEL = 'Properties:'

# Declaration order is the output order.
PROPERTIES: Tuple[Tuple[str, Callable[[DumpableRequest], Any]], ...] = (
    ('asyncStarted', attrgetter('async_started')),
    ('asyncSupported', attrgetter('async_supported')),
    ('authType', attrgetter('auth_type')),
    ('characterEncoding', attrgetter('character_encoding')),
    ('contentLength', attrgetter('content_length')),
    ('contentType', attrgetter('content_type')),
    ('contextPath', attrgetter('context_path')),
    ('dispatcherType', attrgetter('dispatcher_type')),
    ('localAddr', attrgetter('local_addr')),
    ('localName', attrgetter('local_name')),
    ('localPort', attrgetter('local_port')),
    ('locale', attrgetter('locale')),
    ('method', attrgetter('method')),
    ('pathInfo', attrgetter('path_info')),
    ('pathTranslated', attrgetter('path_translated')),
    ('protocol', attrgetter('protocol')),
    ('queryString', attrgetter('query_string')),
    ('remoteAddr', attrgetter('remote_addr')),
    ('remoteHost', attrgetter('remote_host')),
    ('remotePort', attrgetter('remote_port')),
    ('remoteUser', attrgetter('remote_user')),
    ('requestedSessionId', attrgetter('requested_session_id')),
    ('requestedSessionIdFromCookie', attrgetter('requested_session_id_from_cookie')),
    ('requestedSessionIdFromURL', attrgetter('requested_session_id_from_url')),
    ('requestedSessionIdValid', attrgetter('requested_session_id_valid')),
    ('requestURI', attrgetter('request_uri')),
    ('scheme', attrgetter('scheme')),
    ('secure', attrgetter('secure')),
    ('serverName', attrgetter('server_name')),
    ('serverPort', attrgetter('server_port')),
    ('servletPath', attrgetter('servlet_path')),
)


class RequestDump:
    """Builds the dump of a single request.

    Instances are single use; call :func:`dump` instead of using this class
    directly.
    """

    def __init__(self, request: DumpableRequest):
        if request is None:
            raise InvalidArgumentError('request must not be None')
        self.request = request
        self._lines: List[str] = []

    def dump(self) -> str:
        request = self.request

        self.append_section(HEADER_LABEL, request.header_names(), str, request.get_header)
        self.append_section(PARAMETER_LABEL, request.parameter_names(), str, self._parameter_value)
        self.append_section(COOKIES_LABEL, request.get_cookies(), attrgetter('name'), attrgetter('value'))
        self.append_section(ATTRIBUTES_LABEL, request.attribute_names(), str, request.get_attribute)

        self.append_line(PROPERTIES_LABEL)
        for label, accessor in PROPERTIES:
            self.append_entry(label, accessor(request))

        return ''.join(self._lines)

    def _parameter_value(self, name: str) -> Any:
        values = list(self.request.get_parameter_values(name))
        return values[0] if len(values) == 1 else values

    def append_line(self, value: Any) -> None:
        self._lines.append(f'{to_display_text(value)}\n')

    def append_entry(self, name: Any, value: Any) -> None:
        self._lines.append(f'{to_display_text(name):<{NAME_WIDTH}} = {to_display_text(value)}\n')

    def append_section(
        self,
        label: str,
        source: Optional[Iterable[T]],
        name_of: Callable[[T], str],
        value_of: Callable[[T], Any],
    ) -> None:
        """Append a labelled, name-sorted block; nothing at all when ``source`` is empty."""
        elements = list(source) if source is not None else []
        if not elements:
            return

        self.append_line(label)
        # sorted() is stable, so equal names keep their source order
        for element in sorted(elements, key=name_of):
            self.append_entry(name_of(element), value_of(element))
        self.append_line('')


def dump(request: DumpableRequest) -> str:
    """Dump headers, parameters, cookies, attributes and properties of ``request``.

    Raises:
        InvalidArgumentError: If ``request`` is None.
    """
    return RequestDump(request).dump()


__all__ = ['NAME_WIDTH', 'PROPERTIES', 'RequestDump', 'dump']
