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

"""Reverse URL rendering from a pattern AST.

The builder mirrors the AST: literals render as-is, parameters render
their value, and every optional group becomes a nested
:class:`GroupBuilder` that silently renders nothing when any of its own
parameters is missing. Only the root group reports failure to the
caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, FrozenSet, Mapping, Optional, Sequence, Tuple, Union

from pointer.routing.pattern import AstNode
from pointer.routing.pattern import LiteralNode
from pointer.routing.pattern import OptionalNode
from pointer.routing.pattern import ParamNode

__all__ = (
    'BuilderNode',
    'GroupBuilder',
    'LiteralBuilder',
    'ParamBuilder',
    'create_builder',
)


@dataclass(frozen=True)
class LiteralBuilder:
    text: str

    def build(self, params: Mapping[str, Any]) -> str:
        return self.text


@dataclass(frozen=True)
class ParamBuilder:
    key: str

    def build(self, params: Mapping[str, Any]) -> str:
        value = params.get(self.key)
        return '' if value is None else str(value)


@dataclass(frozen=True)
class GroupBuilder:
    """Renders a sequence of builders, all or nothing.

    Attributes:
        known_params (frozenset): Keys of the parameters placed directly
            in this group. Keys of nested groups are not included, so
            that a nested group can be dropped without failing its
            parent.
        children (tuple): Child builders, in pattern order.
    """

    known_params: FrozenSet[str]
    children: Tuple[BuilderNode, ...]

    def build(self, params: Mapping[str, Any]) -> Optional[str]:
        """Render this group.

        Returns:
            str: The rendered text, or ``None`` when a parameter of this
            group is missing.
        """

        for key in self.known_params:
            if params.get(key) is None:
                return None

        # NOTE: A nested group returning None contributes nothing.
        return ''.join(child.build(params) or '' for child in self.children)


BuilderNode = Union[LiteralBuilder, ParamBuilder, GroupBuilder]


def create_builder(ast: Sequence[AstNode]) -> GroupBuilder:
    """Create the root builder for the given pattern AST."""

    known_params = set()
    children = []

    for node in ast:
        if isinstance(node, LiteralNode):
            children.append(LiteralBuilder(node.text))
        elif isinstance(node, ParamNode):
            known_params.add(node.key)
            children.append(ParamBuilder(node.key))
        elif isinstance(node, OptionalNode):
            children.append(create_builder(node.children))
        else:
            raise TypeError('Unknown AST node: {0!r}'.format(node))

    return GroupBuilder(frozenset(known_params), tuple(children))
