"""ClickHouse connection URL parsing and serialization."""

from __future__ import annotations

import dataclasses
from urllib import parse

from chdig import errors, settings

MAX_PORT = 65535

# Ports dropped from the URL, as they are implied by the scheme
DEFAULT_PORTS = {'ftp': 21, 'http': 80, 'https': 443, 'ws': 80, 'wss': 443}


@dataclasses.dataclass
class ConnectionDescriptor:
    """Structured form of the connection URL.

    ``password`` is ``None`` when the URL has no password at all and an
    empty string when it has one that is blank (``user:@host``).
    """

    scheme: str
    host: str
    username: str = ''
    password: str | None = None
    port: int | None = None
    path: str = '/'
    query: str | None = None
    fragment: str | None = None

    def query_pairs(self) -> list[tuple[str, str]]:
        """Return the decoded query pairs, in order."""
        return parse.parse_qsl(self.query or '', keep_blank_values=True)

    def query_keys(self) -> set[str]:
        """Return the decoded names of the query parameters."""
        return {key for key, _value in self.query_pairs()}

    def append_query_pair(self, key: str, value: str) -> None:
        """Append a pair, leaving the existing query text untouched."""
        pair = parse.urlencode([(key, value)])
        self.query = f'{self.query}&{pair}' if self.query else pair

    def __str__(self) -> str:
        userinfo = parse.quote(self.username, safe='')
        if self.password is not None:
            userinfo += ':' + parse.quote(self.password, safe='')
        host = f'[{self.host}]' if ':' in self.host else self.host
        value = f'{self.scheme}://'
        if userinfo:
            value += f'{userinfo}@'
        value += host
        if self.port is not None:
            value += f':{self.port}'
        value += self.path
        if self.query:
            value += f'?{self.query}'
        if self.fragment is not None:
            value += f'#{self.fragment}'
        return value


def parse_url(url: str) -> ConnectionDescriptor:
    """Parse the connection string, adding the default scheme if needed.

    The scheme is only taken from the string when it contains ``://``,
    since ``user:password@host`` would otherwise have ``user`` as the
    scheme.

    :raises chdig.errors.InvalidUrl: if the string is not a valid URL

    """
    absolute = url if '://' in url else f'{settings.DEFAULT_SCHEME}://{url}'
    try:
        return _parse_absolute(absolute)
    except ValueError as error:
        raise errors.InvalidUrl(url, str(error)) from error


def _parse_absolute(url: str) -> ConnectionDescriptor:
    parts = parse.urlsplit(url)
    if not parts.scheme:
        raise ValueError('relative URL without a scheme')
    userinfo, _at, hostport = parts.netloc.rpartition('@')
    username, has_password, password = userinfo.partition(':')
    host, port = _split_host_port(hostport)
    if port is not None and port == DEFAULT_PORTS.get(parts.scheme):
        port = None
    return ConnectionDescriptor(
        scheme=parts.scheme,
        host=host,
        username=parse.unquote(username),
        password=parse.unquote(password) if has_password else None,
        port=port,
        path=parts.path or '/',
        query=parts.query or None,
        fragment=parts.fragment or None,
    )


def _split_host_port(hostport: str) -> tuple[str, int | None]:
    if hostport.startswith('['):
        host, bracket, rest = hostport[1:].partition(']')
        if not bracket or not host:
            raise ValueError('invalid IPv6 address')
        if rest and not rest.startswith(':'):
            raise ValueError('invalid IPv6 address')
        port_text = rest[1:]
    else:
        host, _colon, port_text = hostport.partition(':')
    if not host:
        raise ValueError('empty host')
    if any(char.isspace() for char in host):
        raise ValueError('invalid host')
    if not port_text:
        return host, None
    if not (port_text.isascii() and port_text.isdigit()):
        raise ValueError('invalid port number')
    port = int(port_text)
    if port > MAX_PORT:
        raise ValueError('invalid port number')
    return host, port
