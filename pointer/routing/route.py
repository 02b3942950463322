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

"""A single compiled route."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Pattern, Tuple

from pointer.routing.builder import create_builder
from pointer.routing.builder import GroupBuilder
from pointer.routing.compiler import compile_pattern
from pointer.routing.compiler import declare_params
from pointer.routing.compiler import DEFAULT_PARAM_PATTERN
from pointer.routing.compiler import ParamSpec
from pointer.routing.pattern import AstNode
from pointer.routing.pattern import parse

__all__ = ('MatchData', 'Route', 'compile_route')


@dataclass(frozen=True)
class MatchData:
    """Result of a successful match.

    Attributes:
        route (Route): The matched route.
        params (dict): Parameter values extracted from the URL, with
            defaults filled in for parameters the URL did not contain.
        meta: Opaque value the route was registered with.
    """

    route: Route
    params: Dict[str, Any]
    meta: Any


class Route:
    """A compiled URL pattern that can both match and build URLs.

    Patterns consist of literal text, named parameters and optional
    groups, which may be nested::

        /articles/{id}(-{slug}(-{page}))(.{format})

    Parameter options are given as a ``name -> options`` mapping, where
    options is either a compiled regex (the parameter's matcher), a
    mapping with ``'match'`` and/or ``'default'`` keys, or any other
    value, which is taken as the default. Options may be given for
    parameters absent from the pattern; their defaults then simply
    show up in every match::

        Route('/t{thread_id}/last-page.html', {
            'thread_id': re.compile(r'\\d+'),
            'page': -1,
        })

    Args:
        pattern (str): The URL pattern.

    Keyword Args:
        params (dict): Parameter options (see above).
        meta: Arbitrary data returned as part of every match.
        prefix (str): Text prepended to URLs built by :meth:`build_url`.
        name (str): Name the route was registered under, if any.
        default_param_pattern (str): Regex source used for parameters
            without a declared matcher (default ``[^/]+?``).

    Raises:
        PatternSyntaxError: The pattern is malformed.
        ParamMatcherError: A parameter matcher is invalid, or cannot be
            combined with the other matchers of the route.
    """

    __slots__ = (
        '_ast',
        '_builder',
        '_meta',
        '_name',
        '_params',
        '_pattern',
        '_prefix',
        '_regex',
    )

    def __init__(
        self,
        pattern: str,
        params: Optional[Mapping[str, Any]] = None,
        meta: Any = None,
        prefix: Optional[str] = None,
        name: Optional[str] = None,
        default_param_pattern: str = DEFAULT_PARAM_PATTERN,
    ) -> None:
        if not isinstance(pattern, str):
            raise TypeError('Route patterns must be strings')

        self._pattern = pattern
        self._ast = parse(pattern)

        declared = declare_params(params, default_param_pattern)
        self._regex, params_table = compile_pattern(
            self._ast, declared, default_param_pattern
        )
        self._params = MappingProxyType(params_table)

        self._builder = create_builder(self._ast)
        self._meta = meta
        self._prefix = prefix or ''
        self._name = name

    @property
    def pattern(self) -> str:
        return self._pattern

    @property
    def ast(self) -> Tuple[AstNode, ...]:
        return self._ast

    @property
    def regex(self) -> Pattern[str]:
        return self._regex

    @property
    def params(self) -> Mapping[str, ParamSpec]:
        return self._params

    @property
    def builder(self) -> GroupBuilder:
        return self._builder

    @property
    def meta(self) -> Any:
        return self._meta

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def name(self) -> Optional[str]:
        return self._name

    def match(self, url: str) -> Optional[MatchData]:
        """Match the route against the given URL.

        Args:
            url (str): URL (or path) to match.

        Returns:
            MatchData: Match result, or ``None`` if the route does not
            match `url`.
        """

        captures = self._regex.fullmatch(str(url))
        if captures is None:
            return None

        params = {}
        for key, spec in self._params.items():
            value = None
            if spec.capture_index is not None:
                value = captures.group(spec.capture_index)

            params[key] = spec.default if value is None else value

        return MatchData(route=self, params=params, meta=self._meta)

    def is_valid_params(self, params: Optional[Mapping[str, Any]]) -> bool:
        """Tell whether the given params are valid for this route.

        Every parameter that appears in the pattern, including those
        inside optional groups, must be given and must match its
        matcher. Defaults are not taken into account.
        """

        params = params or {}

        for key, spec in self._params.items():
            if not spec.required:
                continue

            value = params.get(key)
            if value is None or not spec.match_pattern.fullmatch(str(value)):
                return False

        return True

    def build_url(self, params: Optional[Mapping[str, Any]] = None) -> Optional[str]:
        """Render the route with the given params.

        Optional groups lacking any of their own params are omitted.
        Unlike :meth:`is_valid_params`, parameter matchers are not
        checked.

        Returns:
            str: The prefixed URL, or ``None`` when a parameter outside
            of all optional groups is missing.
        """

        url = self._builder.build(params or {})

        # NOTE: An empty rendering is treated as a failure, too.
        if not url:
            return None

        return self._prefix + url

    def __repr__(self) -> str:
        return '<{0}: {1!r}{2}>'.format(
            self.__class__.__name__,
            self._prefix + self._pattern,
            ' name={0!r}'.format(self._name) if self._name else '',
        )


def compile_route(
    pattern: str,
    params: Optional[Mapping[str, Any]] = None,
    meta: Any = None,
    prefix: Optional[str] = None,
) -> Route:
    """Compile a standalone route that is not registered anywhere.

    Raises:
        PatternSyntaxError: The pattern is malformed.
    """

    return Route(pattern, params=params, meta=meta, prefix=prefix)
