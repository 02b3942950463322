import logging
import re

import pytest

import pointer
from pointer import constants


@pytest.fixture
def hosts():
    router = pointer.Router()
    router.add_route('/{id}.html', prefix='//example.com/pages', meta='pages')
    router.add_route(
        '/{id}.html', prefix='https://secure.example.com', meta='secure'
    )
    router.add_route('/{id}.html', meta='root')
    return router


class TestLinkTo:
    @pytest.mark.parametrize(
        'name, params, expected',
        [
            (
                'post',
                {'year': 2012, 'month': '02', 'day': 23, 'slug': 'foobar'},
                '/posts/2012-02-23-foobar.html',
            ),
            (
                'post',
                {'id': 42, 'slug': 'foobar', 'page': 1, 'format': 'html'},
                None,
            ),
            # The longest URL wins among routes sharing a name
            (
                'article',
                {'id': 42, 'slug': 'foobar', 'page': 1, 'format': 'html'},
                '/articles/42-foobar-1.html',
            ),
            (
                'article',
                {'id': 42, 'page': 123456, 'format': 'html'},
                '/articles/42-123456.html',
            ),
            # All params are required, even those in optional groups
            ('article', {'id': 42, 'format': 'html'}, None),
            # Param matchers are respected
            ('article', {'id': 42, 'page': 'abc', 'format': 'html'}, None),
            # The prefix is preserved
            ('post', {'year': 2012, 'month': '02', 'day': 23}, '/blog/2012-02-23.html'),
        ],
    )
    def test_link_to(self, router, name, params, expected):
        assert router.link_to(name, params) == expected

    def test_unknown_name(self, router):
        assert router.link_to('nope', {'id': 1}) is None

    def test_no_params(self, router):
        assert router.link_to('article') is None

    def test_tie_keeps_first_route(self):
        router = pointer.Router()
        first = router.add_route('/a/{x}', name='tie')
        router.add_route('/b/{x}', name='tie')

        assert router.link_to('tie', {'x': 1}) == '/a/1'
        assert router.named('tie')[0] is first

    def test_empty_url_is_skipped(self):
        router = pointer.Router()
        router.add_route('({x})', name='thing', params={'x': {'match': '.*'}})
        router.add_route('/fallback', name='thing')

        assert router.link_to('thing', {'x': ''}) == '/fallback'


class TestMatch:
    def test_prefixed_route(self, router):
        result = router.match('/blog/2012-02-23.html')

        assert result.params == {'year': '2012', 'month': '02', 'day': '23'}
        assert result.route.prefix == '/blog'

    def test_full_url(self, router):
        result = router.match('http://example.com/articles/42')

        assert result.params == {
            'id': '42',
            'slug': None,
            'page': None,
            'format': 'html',
        }
        assert result.route.name == 'article'

    def test_prefix_with_host(self, router):
        result = router.match('http://example.com/blog/2012-02-23.html')
        assert result.params['day'] == '23'

    def test_first_registered_wins(self, router):
        result = router.match('/articles/42-7')
        assert result.route.pattern == '/articles/{id}(-{slug}(-{page}))(.{format})'

    def test_no_match(self, router):
        assert router.match('/nope') is None
        assert router.match('') is None

    def test_prefix_is_not_applied_to_other_paths(self, router):
        assert router.match('/2012-02-23.html') is None

    @pytest.mark.parametrize(
        'url, meta',
        [
            ('http://example.com/pages/42.html', 'pages'),
            ('https://example.com/pages/42.html', 'pages'),
            ('//example.com/pages/42.html', 'pages'),
            ('https://secure.example.com/7.html', 'secure'),
            ('http://secure.example.com/7.html', 'root'),
            ('http://other.example.com/7.html', 'root'),
            ('/7.html', 'root'),
        ],
    )
    def test_host_and_protocol(self, hosts, url, meta):
        assert hosts.match(url).meta == meta

    def test_host_and_protocol_params(self, hosts):
        result = hosts.match('http://example.com/pages/42.html')
        assert result.params == {'id': '42'}

    def test_unprefixed_routes_match_full_url(self):
        router = pointer.Router()
        router.add_route('({proto}:)//example.com/{id}.html')

        result = router.match('http://example.com/123.html')
        assert result.params == {'proto': 'http', 'id': '123'}

        router.options.match_full_url = False
        assert router.match('http://example.com/123.html') is None

    def test_percent_decoding(self):
        router = pointer.Router()
        router.add_route('/wiki/{title}')

        assert router.match('/wiki/caf%C3%A9').params == {'title': 'café'}
        assert router.match('/wiki/a%20b').params == {'title': 'a b'}

        # NOTE: Reserved characters stay encoded
        assert router.match('/wiki/a%2Fb').params == {'title': 'a%2Fb'}

    def test_prefix_order(self):
        router = pointer.Router()
        router.add_route('b/{x}', prefix='example.com/a', meta='short')
        router.add_route('/{x}', prefix='//example.com/ab', meta='long')

        url = 'http://example.com/ab/1'

        # NOTE: 'e' sorts after '/', so the shorter prefix is tried first
        assert router.options.prefix_order == constants.PREFIX_ORDER_LEXICOGRAPHIC
        assert router.match(url).meta == 'short'

        router.options.prefix_order = constants.PREFIX_ORDER_LONGEST
        assert router.match(url).meta == 'long'

    def test_prefixed_routes_take_precedence(self):
        router = pointer.Router()
        router.add_route('/blog/{slug}', meta='plain')
        router.add_route('/{slug}', prefix='/blog', meta='prefixed')

        assert router.match('/blog/hello').meta == 'prefixed'

    def test_parse_url(self):
        assert pointer.Router.parse_url('https://example.com/x')['host'] == (
            'example.com'
        )
        assert pointer.Router().parse_url('/x?y=1')['query'] == 'y=1'


class TestRegistration:
    def test_add_route_returns_route(self):
        router = pointer.Router()
        route = router.add_route(
            '/{id}', name='item', prefix='/items', params={'id': re.compile(r'\d+')}
        )

        assert isinstance(route, pointer.Route)
        assert route.name == 'item'
        assert route.prefix == '/items'
        assert list(router.routes) == [route]
        assert router.named('item') == (route,)

    def test_initial_routes(self, router):
        routes = list(router.routes)

        assert [route.pattern for route in routes] == [
            '/articles/{id}(-{slug}(-{page}))(.{format})',
            '/articles/{id}(-{page})(.{format})',
            '/posts/{year}(-{month}(-{day}))-{slug}.html',
            '/{year}-{month}-{day}.html',
        ]
        assert len(router.named('article')) == 2
        assert len(router.named('post')) == 2
        assert router.named('nope') == ()

    def test_initial_routes_without_options(self):
        router = pointer.Router({'/foo': None, '/bar': {}})
        assert [route.pattern for route in router.routes] == ['/foo', '/bar']

    def test_unnamed_routes(self):
        router = pointer.Router()
        router.add_route('/foo')

        assert router.named('') == ()
        assert router.match('/foo').route.name is None

    def test_syntax_error_registers_nothing(self):
        router = pointer.Router()
        router.add_route('/ok', name='ok', prefix='//example.com')

        with pytest.raises(pointer.PatternSyntaxError):
            router.add_route('/foo/{bar', name='ok', prefix='//example.org')

        assert [route.pattern for route in router.routes] == ['/ok']
        assert len(router.named('ok')) == 1
        assert router.match('http://example.org/foo/bar') is None

    def test_bad_matcher_registers_nothing(self):
        router = pointer.Router()

        with pytest.raises(pointer.ParamMatcherError):
            router.add_route(
                '/{pair}', name='pair', params={'pair': re.compile(r'(\w)\1')}
            )

        assert list(router.routes) == []
        assert router.named('pair') == ()

    def test_queries_leave_registry_unchanged(self, router):
        routes = list(router.routes)
        articles = router.named('article')
        posts = router.named('post')

        router.match('/blog/2012-02-23.html')
        router.match('http://example.com/articles/42')
        router.match('/nope')
        router.link_to('article', {'id': 42, 'page': 1, 'format': 'html'})
        router.link_to('post', {'year': 2012})
        router.link_to('nope', {'id': 1})

        assert list(router.routes) == routes
        assert router.named('article') == articles
        assert router.named('post') == posts
        assert router.named('nope') == ()
        assert router.match('/blog/2012-02-23.html').route is routes[3]

    def test_routes_snapshot(self):
        router = pointer.Router()
        routes = router.routes
        router.add_route('/foo')

        assert list(routes) == []

    def test_default_param_pattern(self):
        router = pointer.Router()
        before = router.add_route('/a/{x}')

        router.options.default_param_pattern = r'\d+'
        after = router.add_route('/b/{x}')

        assert before.match('/a/abc') is not None
        assert after.match('/b/abc') is None
        assert after.match('/b/123').params == {'x': '123'}

    def test_options_instance(self):
        options = pointer.RouterOptions()
        router = pointer.Router(options=options)

        assert router.options is options


class TestRouterOptions:
    def test_defaults(self):
        options = pointer.RouterOptions()

        assert options.prefix_order == 'lexicographic'
        assert options.default_param_pattern == r'[^/]+?'
        assert options.match_full_url is True

    def test_invalid_prefix_order(self):
        options = pointer.RouterOptions()

        with pytest.raises(ValueError) as exinfo:
            options.prefix_order = 'random'

        assert 'random' in str(exinfo.value)
        assert options.prefix_order == 'lexicographic'

    def test_slots(self):
        with pytest.raises(AttributeError):
            pointer.RouterOptions().bogus = True


class TestFactories:
    def test_create_router(self):
        router = pointer.create_router({'/foo/{id}': {'name': 'foo'}})

        assert isinstance(router, pointer.Router)
        assert router.link_to('foo', {'id': 1}) == '/foo/1'

    def test_create_router_empty(self):
        assert list(pointer.create_router().routes) == []

    def test_router_create(self):
        router = pointer.Router.create({'/foo': {'meta': 'm'}})
        assert router.match('/foo').meta == 'm'

    def test_create_link_builder(self):
        builder = pointer.create_link_builder(
            '/foo/{bar}', {'bar': re.compile('[a-z]+')}
        )

        assert builder() is None
        assert builder({'bar': 'abc'}) == '/foo/abc'

        # NOTE: Matchers are not checked when building
        assert builder({'bar': 123}) == '/foo/123'

    def test_create_link_builder_syntax_error(self):
        with pytest.raises(pointer.PatternSyntaxError):
            pointer.create_link_builder('/foo/(bar')


class TestLogging:
    def test_add_route(self, caplog):
        caplog.set_level(logging.DEBUG, logger='pointer')
        pointer.Router().add_route('/foo', name='foo')

        assert "Added route <Route: '/foo' name='foo'>" in caplog.text

    def test_no_match(self, caplog, router):
        caplog.set_level(logging.DEBUG, logger='pointer')
        router.match('/nope')

        assert "No route matches '/nope'" in caplog.text

    def test_no_link(self, caplog, router):
        caplog.set_level(logging.DEBUG, logger='pointer')
        router.link_to('nope', {'id': 1})

        assert "Cannot build a link to 'nope'" in caplog.text

    def test_quiet_by_default(self, caplog, router):
        caplog.set_level(logging.INFO, logger='pointer')
        router.match('/nope')

        assert caplog.records == []
