"""Tests for StarletteRequestAdapter."""

import pytest
from starlette.authentication import SimpleUser, UnauthenticatedUser
from starlette.requests import Request

from reqdump.adapters import HeaderSanitizer, StarletteRequestAdapter
from reqdump.common.interfaces import Cookie, DispatcherType, DumpableRequest
from reqdump.observability import dump


def make_request(headers=(), query_string=b'', body=b'', **scope_overrides) -> Request:
    scope = {
        'type': 'http',
        'http_version': '1.1',
        'method': 'GET',
        'scheme': 'http',
        'path': '/info',
        'raw_path': b'/info',
        'root_path': '',
        'query_string': query_string,
        'headers': [(name.lower().encode('latin-1'), value.encode('latin-1')) for name, value in headers],
        'client': ('10.0.0.1', 51234),
        'server': ('127.0.0.1', 8000),
    }
    scope.update(scope_overrides)

    async def receive():
        return {'type': 'http.request', 'body': body, 'more_body': False}

    return Request(scope, receive)


def test_adapter_satisfies_interface():
    assert isinstance(StarletteRequestAdapter(make_request()), DumpableRequest)


def test_header_names_are_distinct_and_first_value_wins():
    adapter = StarletteRequestAdapter(make_request(headers=[('Host', 'example.com'), ('X-Multi', '1'), ('X-Multi', '2')]))

    assert adapter.header_names() == ['host', 'x-multi']
    assert adapter.get_header('x-multi') == '1'
    assert adapter.get_header('x-missing') is None


def test_query_parameters_keep_all_values():
    adapter = StarletteRequestAdapter(make_request(query_string=b'a=1&b=2&a=3'))

    assert adapter.parameter_names() == ['a', 'b']
    assert adapter.get_parameter_values('a') == ['1', '3']
    assert adapter.get_parameter_values('missing') == []


@pytest.mark.asyncio
async def test_from_request_reads_urlencoded_form():
    request = make_request(
        headers=[('Content-Type', 'application/x-www-form-urlencoded; charset=utf-8')],
        query_string=b'a=1',
        body=b'c=4&a=5',
        method='POST',
    )

    adapter = await StarletteRequestAdapter.from_request(request)

    assert adapter.parameter_names() == ['a', 'c']
    assert adapter.get_parameter_values('a') == ['1', '5']
    assert adapter.get_parameter_values('c') == ['4']


@pytest.mark.asyncio
async def test_from_request_ignores_other_bodies():
    request = make_request(headers=[('Content-Type', 'application/json')], body=b'{"a": 1}', method='POST')

    adapter = await StarletteRequestAdapter.from_request(request)

    assert adapter.parameter_names() == []


def test_cookies_keep_duplicates_in_order():
    request = make_request(headers=[('Cookie', 'session=v1; id=7'), ('Cookie', 'session=v2; "quoted"')])

    adapter = StarletteRequestAdapter(request)

    assert adapter.get_cookies() == [Cookie('session', 'v1'), Cookie('id', '7'), Cookie('session', 'v2'), Cookie('', 'quoted')]
    assert adapter.requested_session_id == 'v1'
    assert adapter.requested_session_id_from_cookie is True
    assert adapter.requested_session_id_valid is False


def test_session_validity_follows_session_scope():
    request = make_request(headers=[('Cookie', 'sid=abc')], session={'user': 'alice'})

    adapter = StarletteRequestAdapter(request, session_cookie='sid')

    assert adapter.requested_session_id == 'abc'
    assert adapter.requested_session_id_valid is True
    assert adapter.requested_session_id_from_url is False


def test_no_session_cookie():
    adapter = StarletteRequestAdapter(make_request())

    assert adapter.get_cookies() == []
    assert adapter.requested_session_id is None
    assert adapter.requested_session_id_from_cookie is False


def test_sanitizer_redacts_headers_and_cookies():
    request = make_request(headers=[('Authorization', 'Bearer secret'), ('Cookie', 'session=v1'), ('X-Keep', 'ok')])
    sanitizer = HeaderSanitizer(['Authorization', 'cookie'])

    adapter = StarletteRequestAdapter(request, sanitizer=sanitizer)

    assert adapter.get_header('authorization') == HeaderSanitizer.REDACTED
    assert adapter.get_header('x-keep') == 'ok'
    assert adapter.get_cookies() == [Cookie('session', HeaderSanitizer.REDACTED)]
    assert adapter.auth_type == 'BEARER'


def test_state_entries_are_attributes():
    request = make_request()
    request.state.user_id = 42
    request.state.tenant = 'acme'

    adapter = StarletteRequestAdapter(request)

    assert adapter.attribute_names() == ['user_id', 'tenant']
    assert adapter.get_attribute('user_id') == 42
    assert adapter.get_attribute('missing') is None


def test_scope_properties():
    request = make_request(
        headers=[('Host', 'example.com:8443'), ('Content-Type', 'text/plain; charset="ISO-8859-1"'), ('Content-Length', '12'), ('Accept-Language', 'de-de,de;q=0.9')],
        query_string=b'q=1',
        path='/app/info',
        raw_path=b'/app/info',
        root_path='/app',
        user=SimpleUser('alice'),
    )

    adapter = StarletteRequestAdapter(request)

    assert adapter.async_started is False
    assert adapter.async_supported is True
    assert adapter.auth_type is None
    assert adapter.character_encoding == 'ISO-8859-1'
    assert adapter.content_length == 12
    assert adapter.content_type == 'text/plain; charset="ISO-8859-1"'
    assert adapter.context_path == '/app'
    assert adapter.dispatcher_type is DispatcherType.REQUEST
    assert adapter.local_addr == '127.0.0.1'
    assert adapter.local_name == '127.0.0.1'
    assert adapter.local_port == 8000
    assert adapter.locale == 'de_DE'
    assert adapter.method == 'GET'
    assert adapter.path_info == '/info'
    assert adapter.path_translated is None
    assert adapter.protocol == 'HTTP/1.1'
    assert adapter.query_string == 'q=1'
    assert adapter.remote_addr == '10.0.0.1'
    assert adapter.remote_host == '10.0.0.1'
    assert adapter.remote_port == 51234
    assert adapter.remote_user == 'alice'
    assert adapter.request_uri == '/app/info'
    assert adapter.scheme == 'http'
    assert adapter.secure is False
    assert adapter.server_name == 'example.com'
    assert adapter.server_port == 8443
    assert adapter.servlet_path == ''


def test_missing_scope_values():
    request = make_request(client=None, server=None, headers=[('Host', 'example.com')], path='/', raw_path=None, user=UnauthenticatedUser())

    adapter = StarletteRequestAdapter(request)

    assert adapter.remote_addr is None
    assert adapter.remote_port == -1
    assert adapter.local_addr is None
    assert adapter.local_port == -1
    assert adapter.remote_user is None
    assert adapter.content_length == -1
    assert adapter.character_encoding is None
    assert adapter.query_string is None
    assert adapter.locale is None
    assert adapter.request_uri == '/'
    assert adapter.server_port == 80


def test_secure_scheme_default_port():
    request = make_request(scheme='https', server=('example.org', 443))

    adapter = StarletteRequestAdapter(request)

    assert adapter.secure is True
    assert adapter.server_name == 'example.org'
    assert adapter.server_port == 443


@pytest.mark.parametrize('accept_language,expected', [
    ('fr', 'fr'),
    ('en-us;q=0.8', 'en_US'),
    ('*', None),
])
def test_locale(accept_language, expected):
    adapter = StarletteRequestAdapter(make_request(headers=[('Accept-Language', accept_language)]))

    assert adapter.locale == expected


def test_dump_of_adapter():
    request = make_request(headers=[('Host', 'example.com'), ('Cookie', 'b=2; a=1')], query_string=b'foo=bar&foo=baz')

    text = dump(StarletteRequestAdapter(request))

    assert text.startswith('Header: \n' + f'{"cookie":<30} = b=2; a=1\n' + f'{"host":<30} = example.com\n' + '\n')
    assert f'{"foo":<30} = [bar, baz]\n' in text
    assert 'Cookies: \n' + f'{"a":<30} = 1\n' + f'{"b":<30} = 2\n' in text
    assert 'Attributes: ' not in text
    assert f'{"dispatcherType":<30} = REQUEST\n' in text
    assert f'{"requestURI":<30} = /info\n' in text


@pytest.mark.parametrize('value', ['\xb2', 'abc', '-5', ' 12', '1_000', ''])
def test_malformed_content_length(value):
    adapter = StarletteRequestAdapter(make_request(headers=[('Content-Length', value)]))

    assert adapter.content_length == -1


@pytest.mark.parametrize('headers', [
    [('Content-Length', '\xb2')],
    [('Accept-Language', '-')],
    [('Accept-Language', ';q=1')],
    [('Accept-Language', ',')],
    [('Content-Type', 'text/plain; charset')],
    [('Content-Type', ';;=')],
    [('Authorization', ' ')],
    [('Cookie', ';;=;')],
    [('Host', 'example.com:abc')],
])
def test_dump_tolerates_malformed_headers(headers):
    text = dump(StarletteRequestAdapter(make_request(headers=headers)))

    assert text.startswith('Header: \n')
    assert f'{"servletPath":<30} = \n' in text


def test_attributes_without_state():
    request = make_request()

    adapter = StarletteRequestAdapter(request)

    assert adapter.attribute_names() == []
    assert adapter.get_attribute('anything') is None


@pytest.mark.parametrize('accept_language', ['-', '-US', ';q=1', ','])
def test_locale_malformed(accept_language):
    adapter = StarletteRequestAdapter(make_request(headers=[('Accept-Language', accept_language)]))

    assert adapter.locale is None


def test_non_numeric_host_port():
    adapter = StarletteRequestAdapter(make_request(headers=[('Host', 'example.com:abc')]))

    assert adapter.server_port == 80
