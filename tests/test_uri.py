import pytest

import pointer
from pointer.util import uri


class TestDecodeURI:
    @pytest.mark.parametrize(
        'encoded, expected',
        [
            ('abcd', 'abcd'),
            ('ab%20cd', 'ab cd'),
            ('This thing is %C3%A7', 'This thing is ç'),
            ('This thing is %c3%a7%E2%82%AC', 'This thing is ç€'),
            ('/disk/lost+found/fd0', '/disk/lost+found/fd0'),
        ],
    )
    def test_decode(self, encoded, expected):
        assert uri.decode_uri(encoded) == expected

    @pytest.mark.parametrize(
        'encoded',
        [
            '/a%2Fb',
            '/a%2fb',
            'http://example.com?x=ab%2Bcd%3D42%2C9',
            '%23%24%26%3A%3B%3F%40',
        ],
    )
    def test_reserved_stay_encoded(self, encoded):
        assert uri.decode_uri(encoded) == encoded

    def test_reserved_mixed(self):
        assert uri.decode_uri('/a%2Fb%20c') == '/a%2Fb c'

    @pytest.mark.parametrize(
        'encoded, expected',
        [
            ('ab%2Gcd', 'ab%2Gcd'),
            ('ab%20cd: 100% coverage', 'ab cd: 100% coverage'),
            ('/100%', '/100%'),
            ('%s' * 100, '%s' * 100),
        ],
    )
    def test_bad_coding(self, encoded, expected):
        assert uri.decode_uri(encoded) == expected

    @pytest.mark.parametrize(
        'encoded',
        [
            '%FF',
            '/x%80y',
            '%C3',
        ],
    )
    def test_bad_unicode_is_left_alone(self, encoded):
        assert uri.decode_uri(encoded) == encoded


class TestParseURL:
    def test_full(self):
        parts = uri.parse_url(
            'http://user:pw@example.com:8080/dir/file.html?x=1&y=2#frag'
        )

        assert parts == {
            'protocol': 'http',
            'host': 'example.com',
            'port': '8080',
            'path': '/dir/file.html',
            'query': 'x=1&y=2',
            'fragment': 'frag',
        }

    @pytest.mark.parametrize(
        'url, protocol, host, path',
        [
            ('https://example.com', 'https', 'example.com', ''),
            ('https://example.com/', 'https', 'example.com', '/'),
            ('//example.com/foo', '', 'example.com', '/foo'),
            ('example.com/foo', '', 'example.com', '/foo'),
            ('/foo/bar.html', '', '', '/foo/bar.html'),
            ('', '', '', ''),
        ],
    )
    def test_partial(self, url, protocol, host, path):
        parts = uri.parse_url(url)

        assert parts['protocol'] == protocol
        assert parts['host'] == host
        assert parts['path'] == path

    def test_decoded(self):
        assert uri.parse_url('/caf%C3%A9?q=%20')['path'] == '/café'
        assert uri.parse_url('/caf%C3%A9?q=%20')['query'] == 'q= '

    def test_exported(self):
        assert pointer.parse_url is uri.parse_url


class TestURLParts:
    def test_wildcards(self):
        assert uri.url_parts('/foo') == uri.URLParts(
            protocol='*',
            host='*',
            port='',
            relative='/foo',
            path='/foo',
            query='',
            fragment='',
        )

    def test_empty(self):
        parts = uri.url_parts('')

        assert parts.protocol == '*'
        assert parts.host == '*'
        assert parts.relative == ''

    def test_relative_keeps_query_and_fragment(self):
        parts = uri.url_parts('http://example.com:81/foo?x=1#y')

        assert parts.protocol == 'http'
        assert parts.host == 'example.com'
        assert parts.port == '81'
        assert parts.relative == '/foo?x=1#y'
        assert parts.path == '/foo'

    @pytest.mark.parametrize(
        'prefix, protocol, host, relative',
        [
            ('/blog', '*', '*', '/blog'),
            ('//example.com', '*', 'example.com', ''),
            ('//example.com/admin', '*', 'example.com', '/admin'),
            ('https://example.com', 'https', 'example.com', ''),
            ('https://example.com/a/b', 'https', 'example.com', '/a/b'),
        ],
    )
    def test_prefixes(self, prefix, protocol, host, relative):
        parts = uri.url_parts(prefix)

        assert (parts.protocol, parts.host, parts.relative) == (
            protocol,
            host,
            relative,
        )
