# Copyright 2024 by the Pointer contributors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""URI utilities.

This module provides the forgiving URL parser used by the router to
split URLs (and route prefixes) into protocol, host and path. These
functions are not available directly in the `pointer` module, except
for :func:`parse_url`, and so must be explicitly imported::

    from pointer.util import uri

    parts = uri.parse_url('https://example.com/foo?bar=1')
"""

from __future__ import annotations

import re
from typing import Dict, NamedTuple

from pointer.constants import WILDCARD

__all__ = (
    'URLParts',
    'decode_uri',
    'parse_url',
    'url_parts',
)


# NOTE: URI-reserved characters stay percent-encoded when decoding, so
#   that e.g. an encoded '/' does not introduce a new path segment.
#   See also RFC 3986.
_RESERVED = ";/?:@&=+$,#"

_HEX_DIGITS = '0123456789ABCDEFabcdef'

# This map construction is based on urllib's implementation
_HEX_TO_BYTE = {
    (a + b).encode(): bytes([int(a + b, 16)])
    for a in _HEX_DIGITS
    for b in _HEX_DIGITS
    if chr(int(a + b, 16)) not in _RESERVED
}

# NOTE: This is the "loose" flavour of the well-known parseUri regex.
#   It is more intuitive for partial URLs than RFC 3986 parsing: the
#   leading '//' is optional, so 'example.com/foo' yields a host, and a
#   scheme is only recognized when it contains no '.', '/', '?' or '#'.
_LOOSE_URL_PATTERN = re.compile(
    r'^(?:(?![^:@]+:[^:@/]*@)(?P<protocol>[^:/?#.]+):)?'
    r'(?://)?'
    r'(?P<authority>(?:(?P<userinfo>(?P<user>[^:@]*):?(?P<password>[^:@]*))?@)?'
    r'(?P<host>[^:/?#]*)(?::(?P<port>\d*))?)'
    r'(?P<relative>(?P<path>(?P<directory>/(?:[^?#](?![^?#/]*\.[^?#/.]+(?:[?#]|$)))*/?)?'
    r'(?P<file>[^?#/]*))'
    r'(?:\?(?P<query>[^#]*))?'
    r'(?:#(?P<fragment>.*))?)',
    re.DOTALL,
)


class URLParts(NamedTuple):
    """Components of a URL, as used internally by the router.

    Missing `protocol` and `host` are represented by the ``'*'``
    wildcard; all other missing components are empty strings.
    """

    protocol: str
    host: str
    port: str
    relative: str
    path: str
    query: str
    fragment: str


def decode_uri(encoded_uri: str) -> str:
    """Decode percent-encoded characters of a full URI.

    This function models the behavior of the ECMAScript ``decodeURI()``
    function: escape sequences that stand for URI-reserved characters
    (such as ``%2F``) are retained as-is, and ``'+'`` is never turned
    into a space.

    Args:
        encoded_uri (str): An encoded URI (full or partial).

    Returns:
        str: A decoded URI. If the decoded bytes are not valid UTF-8,
        the original string is returned unchanged.
    """

    # Short-circuit if we can
    if '%' not in encoded_uri:
        return encoded_uri

    tokens = encoded_uri.encode().split(b'%')

    decoded_uri = bytearray(tokens[0])
    for token in tokens[1:]:
        token_partial = token[:2]
        try:
            decoded_uri += _HEX_TO_BYTE[token_partial] + token[2:]
        except KeyError:
            # reserved or malformed escape like "x=%" or "y=%+"
            decoded_uri += b'%' + token

    try:
        return decoded_uri.decode('utf-8')
    except UnicodeDecodeError:
        return encoded_uri


def _split(url: str) -> Dict[str, str]:
    match = _LOOSE_URL_PATTERN.match(decode_uri(str(url)))

    # NOTE: Every part of the pattern is optional, so it matches any
    #   string; missing groups are reported as empty strings.
    return {key: value or '' for key, value in match.groupdict().items()}


def url_parts(url: str) -> URLParts:
    """Split a URL into the parts the router dispatches on.

    This function never raises; anything it cannot make sense of ends
    up in the path.

    Args:
        url (str): Full URL, protocol-relative URL, or bare path.

    Returns:
        URLParts: Parsed URL, with ``'*'`` in place of a missing
        protocol or host.
    """

    parts = _split(url)

    return URLParts(
        protocol=parts['protocol'] or WILDCARD,
        host=parts['host'] or WILDCARD,
        port=parts['port'],
        relative=parts['relative'],
        path=parts['path'],
        query=parts['query'],
        fragment=parts['fragment'],
    )


def parse_url(url: str) -> Dict[str, str]:
    """Parse a URL into its components.

    Args:
        url (str): URL to parse.

    Returns:
        dict: A mapping with the following keys, each mapped to a
        (possibly empty) string:

        * `protocol`: e.g. ``'http'``, ``'https'``, ``'file'``
        * `host`: e.g. ``'www.example.com'``, ``'localhost'``
        * `port`: e.g. ``'8080'``
        * `path`: e.g. ``'/folder/dir/index.html'``
        * `query`: e.g. ``'item=value&item2=value2'``
        * `fragment`: everything after the ``'#'``
    """

    parts = _split(url)

    return {
        key: parts[key]
        for key in ('protocol', 'host', 'port', 'path', 'query', 'fragment')
    }
