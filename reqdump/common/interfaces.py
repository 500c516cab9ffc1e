"""Structural interface of the request objects the dumper can read."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Protocol, Sequence, runtime_checkable


class DispatcherType(Enum):
    """How the request reached the handler that is dumping it."""

    FORWARD = 'forward'
    INCLUDE = 'include'
    REQUEST = 'request'
    ASYNC = 'async'
    ERROR = 'error'


@dataclass(frozen=True)
class Cookie:
    """A single name/value pair sent by the client in a Cookie header."""

    name: str
    value: str


@runtime_checkable
class DumpableRequest(Protocol):
    """Read-only view of an inbound request.

    Collection accessors may return ``None`` or an empty iterable; scalar
    properties may be ``None`` when the server has no value for them.
    """

    def header_names(self) -> Optional[Iterable[str]]: ...

    def get_header(self, name: str) -> Optional[str]: ...

    def parameter_names(self) -> Optional[Iterable[str]]: ...

    def get_parameter_values(self, name: str) -> Sequence[str]: ...

    def get_cookies(self) -> Optional[Sequence[Cookie]]: ...

    def attribute_names(self) -> Optional[Iterable[str]]: ...

    def get_attribute(self, name: str) -> Any: ...

    async_started: bool
    async_supported: bool
    auth_type: Optional[str]
    character_encoding: Optional[str]
    content_length: int
    content_type: Optional[str]
    context_path: str
    dispatcher_type: DispatcherType
    local_addr: Optional[str]
    local_name: Optional[str]
    local_port: int
    locale: Optional[str]
    method: str
    path_info: Optional[str]
    path_translated: Optional[str]
    protocol: str
    query_string: Optional[str]
    remote_addr: Optional[str]
    remote_host: Optional[str]
    remote_port: int
    remote_user: Optional[str]
    requested_session_id: Optional[str]
    requested_session_id_from_cookie: bool
    requested_session_id_from_url: bool
    requested_session_id_valid: bool
    request_uri: str
    scheme: str
    secure: bool
    server_name: str
    server_port: int
    servlet_path: str


__all__ = ['Cookie', 'DispatcherType', 'DumpableRequest']
