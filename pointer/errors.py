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

"""Pointer-specific errors.

Only configuration mistakes are reported by raising; queries such as
:meth:`pointer.Router.match` or :meth:`pointer.Router.link_to` simply
return ``None`` when nothing fits. All classes are available directly
from the `pointer` package namespace::

    import pointer

    try:
        router.add_route('/foo/(bar')
    except pointer.PatternSyntaxError as ex:
        print(ex.position)
"""

from __future__ import annotations

from typing import Optional

__all__ = ('ParamMatcherError', 'PatternSyntaxError')


class PatternSyntaxError(ValueError):
    """The route pattern does not conform to the pattern grammar.

    Raised while compiling a pattern, i.e., when a route is being
    registered. Nothing is registered for a pattern that fails to
    compile.

    Args:
        pattern (str): The offending pattern.
        position (int): Offset within `pattern` at which the problem
            was detected. For unterminated groups and parameters this
            is the length of the pattern.
        description (str): Human-friendly explanation of the problem.
    """

    def __init__(
        self, pattern: str, position: int, description: Optional[str] = None
    ) -> None:
        self.pattern = pattern
        self.position = position
        self.description = description or 'Unexpected input'
        super().__init__(self._render())

    def _render(self) -> str:
        # NOTE: Mimic the familiar "pointer under the offending char"
        #   layout, since patterns are normally short one-liners.
        return '{0} at position {1}:\n    {2}\n    {3}^'.format(
            self.description,
            self.position,
            self.pattern,
            ' ' * self.position,
        )


class ParamMatcherError(ValueError):
    """A parameter matcher cannot be used to compile the route.

    Raised while compiling a route when a ``'match'`` option is not a
    valid regular expression, or when the matchers of a route are
    valid on their own but cannot be combined, e.g. because two of them
    define the same named group, or one uses a numbered backreference
    (embedding renumbers its groups; use a named backreference instead).
    """
