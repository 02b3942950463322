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

"""Route registry with prefix-aware matching and named link building."""

from __future__ import annotations

import logging
import re
from threading import Lock
from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Pattern,
    Tuple,
)

from pointer import constants
from pointer.routing.compiler import DEFAULT_PARAM_PATTERN
from pointer.routing.route import compile_route
from pointer.routing.route import MatchData
from pointer.routing.route import Route
from pointer.util.uri import parse_url
from pointer.util.uri import url_parts

__all__ = (
    'Router',
    'RouterOptions',
    'create_link_builder',
    'create_router',
)

_logger = logging.getLogger(__name__)

# prefix -> path-stripping regex (or None)
_PrefixBucket = Dict[str, Optional[Pattern[str]]]


def _variants(value: str) -> Tuple[str, ...]:
    # NOTE: Exact buckets are searched before the wildcard one.
    if value == constants.WILDCARD:
        return (constants.WILDCARD,)

    return (value, constants.WILDCARD)


class RouterOptions:
    """Defines a set of configurable router options.

    An instance of this class is exposed via :attr:`Router.options`.

    Attributes:
        prefix_order (str): Order in which the prefixes of a host and
            protocol bucket are tried by :meth:`Router.match`. Either
            ``'lexicographic'`` (default), which visits prefixes in
            descending string order, or ``'longest'``, which visits
            longer prefixes first.

            Note:
                Descending string order approximates "most specific
                prefix first", but it is not the same as longest-match
                when prefixes differ in both length and leading
                characters. It is nevertheless the default, for
                compatibility.

        default_param_pattern (str): Regex source used for parameters
            that do not declare a matcher (default ``[^/]+?``). Only
            affects routes added after the change.
        match_full_url (bool): Whether routes without a prefix are also
            tried against the complete URL when they do not match its
            path (default ``True``). This lets a pattern that spells
            out a protocol or host, e.g. ``'//example.com/{id}'``,
            match an absolute URL.
    """

    __slots__ = ('_prefix_order', 'default_param_pattern', 'match_full_url')

    def __init__(self) -> None:
        self._prefix_order = constants.PREFIX_ORDER_LEXICOGRAPHIC
        self.default_param_pattern = DEFAULT_PARAM_PATTERN
        self.match_full_url = True

    @property
    def prefix_order(self) -> str:
        return self._prefix_order

    @prefix_order.setter
    def prefix_order(self, value: str) -> None:
        if value not in constants.PREFIX_ORDERS:
            raise ValueError(
                'Invalid prefix order {0!r}; expected one of: {1}'.format(
                    value, ', '.join(sorted(constants.PREFIX_ORDERS))
                )
            )

        self._prefix_order = value


class Router:
    """Registry of routes.

    Routes are grouped by the prefix (think of it as the mount point)
    they were added with, and by name. A prefix may include a protocol
    and a host, in which case the routes under it are only considered
    for URLs with the same protocol and host::

        router = pointer.Router()
        router.add_route('/{id}.html', prefix='//example.com/pages')

        router.match('https://example.com/pages/42.html').params
        # -> {'id': '42'}

    Note:
        Adding routes is serialized with a lock, but queries do not
        coordinate with registration. Register every route before the
        router is shared between threads.

    Args:
        routes (dict): Optional mapping of ``pattern -> options`` pairs
            used to prefill the router. Each `options` item is a dict of
            keyword arguments for :meth:`add_route`.

    Keyword Args:
        options (RouterOptions): Router configuration. A default
            instance is created when not given.
    """

    __slots__ = (
        '_options',
        '_prefix_index',
        '_register_lock',
        '_routes',
        '_routes_by_name',
        '_routes_by_prefix',
    )

    def __init__(
        self,
        routes: Optional[Mapping[str, Optional[Mapping[str, Any]]]] = None,
        options: Optional[RouterOptions] = None,
    ) -> None:
        self._options = options or RouterOptions()

        # Routes grouped by prefix ('*' means no prefix), e.g.:
        #
        #   {'*': [Route, ...], '//example.com': [Route, ...]}
        #
        self._routes_by_prefix: Dict[str, List[Route]] = {}

        # Path-stripping regexes of known prefixes, grouped by host and
        # protocol; None when a prefix has no path component:
        #
        #   {
        #       'example.com': {
        #           'https': {'https://users.example.com': None},
        #           '*': {
        #               '//example.com': None,
        #               '//example.com/admin': re.compile('/admin'),
        #           },
        #       },
        #   }
        #
        self._prefix_index: Dict[str, Dict[str, _PrefixBucket]] = {}

        self._routes_by_name: Dict[str, List[Route]] = {}
        self._routes: List[Route] = []
        self._register_lock = Lock()

        for pattern, route_options in (routes or {}).items():
            self.add_route(pattern, **(route_options or {}))

    @classmethod
    def create(
        cls, routes: Optional[Mapping[str, Optional[Mapping[str, Any]]]] = None
    ) -> Router:
        """Create a new router, prefilled with the given routes."""
        return cls(routes)

    @property
    def options(self) -> RouterOptions:
        return self._options

    @property
    def routes(self) -> Iterator[Route]:
        """Iterate over all registered routes, in registration order."""
        return iter(tuple(self._routes))

    def named(self, name: str) -> Tuple[Route, ...]:
        """Return the routes registered under `name`, oldest first."""
        return tuple(self._routes_by_name.get(name, ()))

    def add_route(
        self,
        pattern: str,
        name: Optional[str] = None,
        prefix: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
        meta: Any = None,
    ) -> Route:
        """Compile and register a new route.

        Args:
            pattern (str): Route pattern, e.g.
                ``'/articles/{id}(.{format})'``.

        Keyword Args:
            name (str): Name of the route, used by :meth:`link_to`.
                Several routes may share a name.
            prefix (str): Mount point of the route. It may specify a
                protocol and host as well as a path, e.g.
                ``'https://example.com/blog'`` or ``'//example.com'``.
                URLs built for the route are prefixed with it verbatim.
            params (dict): Parameter options, as accepted by
                :class:`~pointer.routing.Route`.
            meta: Arbitrary data returned with every match.

        Returns:
            Route: The newly registered route.

        Raises:
            PatternSyntaxError: The pattern is malformed. Nothing is
                registered in that case.
            ParamMatcherError: A parameter matcher is invalid, or
                cannot be combined with the other matchers. Nothing is
                registered in that case.
        """

        route = Route(
            pattern,
            params=params,
            meta=meta,
            prefix=prefix,
            name=name,
            default_param_pattern=self._options.default_param_pattern,
        )

        with self._register_lock:
            self._routes.append(route)
            self._routes_by_prefix.setdefault(
                prefix or constants.WILDCARD, []
            ).append(route)

            if name:
                self._routes_by_name.setdefault(name, []).append(route)

            if prefix:
                self._index_prefix(prefix)

        _logger.debug('Added route %r', route)
        return route

    def match(self, url: str) -> Optional[MatchData]:
        """Find the first route matching the given URL.

        Prefixed routes are tried first: buckets for the URL's exact
        host are searched before those for any host, and within a host,
        buckets for the exact protocol come before those for any
        protocol. Within a bucket, prefixes are visited in the order
        given by :attr:`RouterOptions.prefix_order`; a prefix with a
        path only applies when the URL's path starts with it, and that
        part is stripped before matching the prefix's routes.

        When no prefixed route matches, routes without a prefix are
        tried in registration order against the URL's path (and, unless
        disabled via :attr:`RouterOptions.match_full_url`, against the
        complete URL).

        Args:
            url (str): The URL to match.

        Returns:
            MatchData: Result of the first successful match, or ``None``.
        """

        parts = url_parts(url)
        path = parts.relative

        for host in _variants(parts.host):
            protocols = self._prefix_index.get(host)
            if not protocols:
                continue

            for protocol in _variants(parts.protocol):
                prefixes = self._prefix_index[host].get(protocol)
                if not prefixes:
                    continue

                for prefix in self._ordered(prefixes):
                    result = self._match_prefix(prefix, prefixes[prefix], path)
                    if result is not None:
                        return result

        match_full_url = self._options.match_full_url
        for route in self._routes_by_prefix.get(constants.WILDCARD, ()):
            result = route.match(path)
            if result is None and match_full_url:
                result = route.match(url)

            if result is not None:
                return result

        _logger.debug('No route matches %r', url)
        return None

    def link_to(
        self, name: str, params: Optional[Mapping[str, Any]] = None
    ) -> Optional[str]:
        """Build a URL for the route group registered under `name`.

        Only routes for which :meth:`~pointer.routing.Route.is_valid_params`
        holds are considered; that is, every parameter of the pattern,
        including those in optional groups, must be given and must match
        its matcher. If several routes qualify, the one producing the
        longest URL wins; on a tie, the route that was added first.

        Args:
            name (str): Name of the route (or group of routes).
            params (dict): Values of the route parameters.

        Returns:
            str: The URL, or ``None`` if no route named `name` accepts
            the given params.
        """

        url = None

        for route in self._routes_by_name.get(name, ()):
            if not route.is_valid_params(params):
                continue

            candidate = route.build_url(params)
            if candidate is None:
                continue

            if url is None or len(url) < len(candidate):
                url = candidate

        if url is None:
            _logger.debug('Cannot build a link to %r with %r', name, params)

        return url

    parse_url = staticmethod(parse_url)

    # -----------------------------------------------------------------
    # Private
    # -----------------------------------------------------------------

    def _index_prefix(self, prefix: str) -> None:
        parts = url_parts(prefix)

        strip_pattern = None
        if parts.relative:
            strip_pattern = re.compile(re.escape(parts.relative))

        protocols = self._prefix_index.setdefault(parts.host, {})
        protocols.setdefault(parts.protocol, {})[prefix] = strip_pattern

    def _ordered(self, prefixes: Mapping[str, Any]) -> List[str]:
        if self._options.prefix_order == constants.PREFIX_ORDER_LONGEST:
            return sorted(prefixes, key=lambda p: (len(p), p), reverse=True)

        return sorted(prefixes, reverse=True)

    def _match_prefix(
        self, prefix: str, strip_pattern: Optional[Pattern[str]], path: str
    ) -> Optional[MatchData]:
        if strip_pattern is not None:
            stripped = strip_pattern.match(path)

            # NOTE: The prefix does not apply if nothing was stripped.
            if stripped is None or not stripped.end():
                return None

            path = path[stripped.end() :]

        for route in self._routes_by_prefix[prefix]:
            result = route.match(path)
            if result is not None:
                return result

        return None


def create_router(
    routes: Optional[Mapping[str, Optional[Mapping[str, Any]]]] = None,
) -> Router:
    """Create a new :class:`Router`, prefilled with the given routes.

    Args:
        routes (dict): Mapping of ``pattern -> options`` pairs, where
            `options` holds keyword arguments for
            :meth:`Router.add_route`.
    """

    return Router(routes)


def create_link_builder(
    pattern: str, params: Optional[Mapping[str, Any]] = None
) -> Callable[..., Optional[str]]:
    """Return a function that builds URLs for the given pattern.

    Example::

        builder = pointer.create_link_builder(
            '/foo/{bar}', {'bar': re.compile('[a-z]+')}
        )

        builder()                # -> None
        builder({'bar': 'abc'})  # -> '/foo/abc'

    Note that, like :meth:`~pointer.routing.Route.build_url`, the
    builder does not validate values against parameter matchers.

    Args:
        pattern (str): Route pattern.
        params (dict): Parameter options, as accepted by
            :class:`~pointer.routing.Route`.

    Raises:
        PatternSyntaxError: The pattern is malformed.
    """

    route = compile_route(pattern, params)

    def build(params: Optional[Mapping[str, Any]] = None) -> Optional[str]:
        return route.build_url(params or {})

    return build
