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

"""Route pattern lexer, parser and AST.

The pattern grammar is tiny::

    pattern       := parts END
    parts         := part*
    part          := LITERAL
                   | OPEN_PARAM parts_as_name CLOSE
                   | OPEN_OPTIONAL parts CLOSE
    parts_as_name := LITERAL+

``{name}`` denotes a named parameter, ``(...)`` an optional group that
may be nested, and a backslash escapes any of the ``{}()``
metacharacters.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple, Tuple, Union

from pointer.errors import PatternSyntaxError

__all__ = (
    'AstNode',
    'LiteralNode',
    'OptionalNode',
    'ParamNode',
    'Token',
    'TokenKind',
    'parse',
    'tokenize',
)

_ESCAPE = '\\'
_METACHARS = frozenset('{}()')


class TokenKind(Enum):
    LITERAL = 'LITERAL'
    OPEN_PARAM = 'OPEN_PARAM'
    OPEN_OPTIONAL = 'OPEN_OPTIONAL'
    CLOSE = 'CLOSE'
    END = 'END'


class Token(NamedTuple):
    kind: TokenKind
    text: str
    position: int


@dataclass(frozen=True)
class LiteralNode:
    """Fixed text that must appear verbatim."""

    text: str


@dataclass(frozen=True)
class ParamNode:
    """Named placeholder, i.e. ``{key}``."""

    key: str


@dataclass(frozen=True)
class OptionalNode:
    """Group of nodes that may be omitted as a whole, i.e. ``(...)``."""

    children: Tuple[AstNode, ...]


AstNode = Union[LiteralNode, ParamNode, OptionalNode]


# Lexer contexts
_PLAIN = 'plain'
_PARAM = 'param'
_OPTIONAL = 'optional'


def tokenize(pattern: str) -> List[Token]:
    """Split a route pattern into a list of tokens.

    Runs of literal text (including escaped metacharacters) are
    coalesced into a single ``LITERAL`` token. The list always ends
    with an ``END`` token.

    Raises:
        PatternSyntaxError: A closing character that is not valid in
            the current context was found, e.g. ``}`` inside an
            optional group.
    """

    tokens = []
    contexts = [_PLAIN]

    buffer: List[str] = []
    buffer_start = 0

    def flush():
        if buffer:
            tokens.append(Token(TokenKind.LITERAL, ''.join(buffer), buffer_start))
            buffer.clear()

    pos = 0
    length = len(pattern)

    while pos < length:
        char = pattern[pos]
        context = contexts[-1]

        if char == _ESCAPE:
            if not buffer:
                buffer_start = pos

            next_char = pattern[pos + 1 : pos + 2]
            if next_char and next_char in _METACHARS:
                buffer.append(next_char)
                pos += 2
            else:
                buffer.append(char)
                pos += 1

            continue

        if char == '{' or char == '(':
            flush()
            if char == '{':
                tokens.append(Token(TokenKind.OPEN_PARAM, char, pos))
                contexts.append(_PARAM)
            else:
                tokens.append(Token(TokenKind.OPEN_OPTIONAL, char, pos))
                contexts.append(_OPTIONAL)

        elif char == '}' or char == ')':
            closes = _PARAM if char == '}' else _OPTIONAL

            if context == closes:
                flush()
                tokens.append(Token(TokenKind.CLOSE, char, pos))
                contexts.pop()
            elif context == _PLAIN:
                # NOTE: A stray closing character at the top level is
                #   just text, e.g. '/smile:)'.
                if not buffer:
                    buffer_start = pos
                buffer.append(char)
            else:
                raise PatternSyntaxError(
                    pattern,
                    pos,
                    'Unexpected {0!r} inside {1}; use "\\{0}" to match it '
                    'literally'.format(
                        char,
                        'parameter name' if context == _PARAM else 'optional group',
                    ),
                )

        else:
            if not buffer:
                buffer_start = pos
            buffer.append(char)

        pos += 1

    flush()
    tokens.append(Token(TokenKind.END, '', length))

    return tokens


class _Parser:
    """Recursive descent parser over the output of :func:`tokenize`."""

    def __init__(self, pattern: str) -> None:
        self._pattern = pattern
        self._tokens = tokenize(pattern)
        self._index = 0

    def parse(self) -> Tuple[AstNode, ...]:
        nodes = self._parts()

        token = self._peek()
        if token.kind is not TokenKind.END:
            raise self._error(token, 'Unexpected {0!r}'.format(token.text))

        return nodes

    def _peek(self) -> Token:
        return self._tokens[self._index]

    def _advance(self) -> Token:
        token = self._tokens[self._index]
        self._index += 1
        return token

    def _error(self, token: Token, description: str) -> PatternSyntaxError:
        return PatternSyntaxError(self._pattern, token.position, description)

    def _parts(self) -> Tuple[AstNode, ...]:
        nodes: List[AstNode] = []
        text: List[str] = []

        while True:
            kind = self._peek().kind

            if kind is TokenKind.LITERAL:
                text.append(self._advance().text)
                continue

            if text:
                nodes.append(LiteralNode(''.join(text)))
                text = []

            if kind is TokenKind.OPEN_PARAM:
                nodes.append(self._param())
            elif kind is TokenKind.OPEN_OPTIONAL:
                nodes.append(self._optional())
            else:
                # NOTE: CLOSE or END; the caller decides which is legal.
                return tuple(nodes)

    def _param(self) -> ParamNode:
        opening = self._advance()
        name = []

        while self._peek().kind is TokenKind.LITERAL:
            name.append(self._advance().text)

        token = self._advance()

        if token.kind is TokenKind.END:
            raise self._error(token, 'Unterminated parameter')

        if token.kind is not TokenKind.CLOSE:
            raise self._error(
                token, 'Parameter names may only contain literal text'
            )

        if not name:
            raise self._error(opening, 'Parameter name may not be empty')

        return ParamNode(''.join(name))

    def _optional(self) -> OptionalNode:
        self._advance()
        children = self._parts()

        token = self._advance()
        if token.kind is not TokenKind.CLOSE:
            raise self._error(token, 'Unterminated optional group')

        return OptionalNode(children)


def parse(pattern: str) -> Tuple[AstNode, ...]:
    """Parse a route pattern into a tuple of AST nodes.

    Args:
        pattern (str): Route pattern, e.g. ``'/articles/{id}(.{format})'``.

    Returns:
        tuple: Top-level AST nodes, in pattern order.

    Raises:
        PatternSyntaxError: The pattern is malformed.
    """

    return _Parser(pattern).parse()
