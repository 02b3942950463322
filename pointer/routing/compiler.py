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

"""Lowering of a pattern AST to an anchored regular expression."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import replace
import re
from typing import Any, Dict, Mapping, NamedTuple, Optional, Pattern, Sequence

from pointer.errors import ParamMatcherError
from pointer.routing.pattern import AstNode
from pointer.routing.pattern import LiteralNode
from pointer.routing.pattern import OptionalNode
from pointer.routing.pattern import ParamNode

__all__ = (
    'CompiledPattern',
    'DEFAULT_PARAM_PATTERN',
    'ParamSpec',
    'compile_pattern',
    'declare_params',
)

DEFAULT_PARAM_PATTERN = r'[^/]+?'
"""Sub-pattern used for parameters without an explicit matcher."""

# NOTE: Flags that can be scoped to the sub-pattern of a single param.
_INLINE_FLAGS = (
    (re.IGNORECASE, 'i'),
    (re.MULTILINE, 'm'),
    (re.DOTALL, 's'),
    (re.VERBOSE, 'x'),
)


@dataclass(frozen=True)
class ParamSpec:
    """Compiled configuration of a single route parameter.

    Attributes:
        capture_index (int): Index of the regex capture group holding
            the parameter's value, or ``None`` when the parameter was
            declared via options but never appears in the pattern.
        required (bool): ``True`` for every parameter that appears
            anywhere in the pattern, optional groups included.
        default: Value used when a matched URL did not contain the
            parameter.
        match_pattern: Compiled regex that values of this parameter
            must match.
    """

    capture_index: Optional[int]
    required: bool
    default: Any
    match_pattern: Pattern[str]


class CompiledPattern(NamedTuple):
    regex: Pattern[str]
    params: Dict[str, ParamSpec]


class _Lowered(NamedTuple):
    source: str
    last_index: int
    params: Dict[str, ParamSpec]


def declare_params(
    options: Optional[Mapping[str, Any]],
    default_pattern: str = DEFAULT_PARAM_PATTERN,
) -> Dict[str, ParamSpec]:
    """Normalize caller-supplied parameter options into specs.

    Each option value may be given as:

    * a compiled regex: shorthand for ``{'match': regex}``;
    * a mapping with optional ``'match'`` (regex or regex source) and
      ``'default'`` keys;
    * any other value: shorthand for ``{'default': value}``.

    Raises:
        ParamMatcherError: A ``'match'`` source is not a valid regex.

    Returns:
        dict: Specs that are neither required nor bound to a capture
        group yet; :func:`compile_pattern` fills that in.
    """

    declared = {}

    for key, cfg in (options or {}).items():
        default = None
        match = None

        if isinstance(cfg, re.Pattern):
            match = cfg
        elif isinstance(cfg, Mapping):
            default = cfg.get('default')
            match = cfg.get('match')
        else:
            default = cfg

        if match is None:
            match = default_pattern

        if not isinstance(match, re.Pattern):
            try:
                match = re.compile(match)
            except re.error as ex:
                raise ParamMatcherError(
                    'Invalid matcher for parameter {0!r}: {1}'.format(key, ex)
                ) from ex

        declared[key] = ParamSpec(
            capture_index=None,
            required=False,
            default=default,
            match_pattern=match,
        )

    return declared


def _sub_pattern(match_pattern: Pattern[str]) -> str:
    source = match_pattern.pattern
    flags = ''.join(
        letter for flag, letter in _INLINE_FLAGS if match_pattern.flags & flag
    )

    if not flags:
        return source

    # NOTE: In verbose mode a trailing comment would swallow the closing
    #   parenthesis, so the sub-pattern is terminated with a newline.
    if match_pattern.flags & re.VERBOSE:
        source += '\n'

    return '(?{0}:{1})'.format(flags, source)


def _lower_param(
    node: ParamNode,
    last_index: int,
    params: Dict[str, ParamSpec],
    default_pattern: Pattern[str],
) -> _Lowered:
    index = last_index + 1
    spec = params.get(node.key)

    if spec is None:
        spec = ParamSpec(
            capture_index=index,
            required=True,
            default=None,
            match_pattern=default_pattern,
        )
    else:
        # NOTE: A key seen twice keeps its options, but the last
        #   occurrence determines which group is extracted.
        spec = replace(spec, capture_index=index, required=True)

    source = '({0})'.format(_sub_pattern(spec.match_pattern))

    # NOTE: Groups inside a custom matcher still occupy capture indices.
    last_index = index + spec.match_pattern.groups

    return _Lowered(source, last_index, {**params, node.key: spec})


def _lower(
    nodes: Sequence[AstNode],
    last_index: int,
    params: Dict[str, ParamSpec],
    default_pattern: Pattern[str],
) -> _Lowered:
    parts = []

    for node in nodes:
        if isinstance(node, LiteralNode):
            parts.append(re.escape(node.text))

        elif isinstance(node, ParamNode):
            source, last_index, params = _lower_param(
                node, last_index, params, default_pattern
            )
            parts.append(source)

        elif isinstance(node, OptionalNode):
            source, last_index, params = _lower(
                node.children, last_index, params, default_pattern
            )
            parts.append('(?:{0})?'.format(source))

        else:
            raise TypeError('Unknown AST node: {0!r}'.format(node))

    return _Lowered(''.join(parts), last_index, params)


def compile_pattern(
    ast: Sequence[AstNode],
    declared: Optional[Mapping[str, ParamSpec]] = None,
    default_pattern: str = DEFAULT_PARAM_PATTERN,
) -> CompiledPattern:
    """Compile a pattern AST into an anchored regex and a param table.

    Capture indices are assigned left to right, starting at 1, in the
    same order as the groups of the resulting regex.

    Args:
        ast: Nodes as returned by :func:`pointer.routing.pattern.parse`.
        declared: Specs from :func:`declare_params`, if any.
        default_pattern (str): Regex source for parameters that have no
            declared matcher (default ``[^/]+?``).

    Returns:
        CompiledPattern: A ``(regex, params)`` tuple.

    Raises:
        ParamMatcherError: The parameter matchers cannot be embedded
            in one regex.
    """

    lowered = _lower(ast, 0, dict(declared or {}), re.compile(default_pattern))

    try:
        regex = re.compile('^{0}$'.format(lowered.source))
    except re.error as ex:
        # NOTE: Matchers that compile on their own may still conflict
        #   once embedded, e.g. via duplicate group names or numbered
        #   backreferences, which are renumbered by embedding.
        raise ParamMatcherError(
            'Parameter matchers cannot be combined into a single '
            'route regex: {0}'.format(ex)
        ) from ex

    return CompiledPattern(regex, lowered.params)
