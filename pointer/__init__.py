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

"""Primary package for Pointer, a URL pattern router.

Pointer compiles route patterns such as ``'/articles/{id}(.{format})'``
into matchers that extract parameters from URLs, and into builders that
render URLs from parameters. The `pointer` package can be used to
directly access the most commonly used classes and functions::

    import pointer

    router = pointer.Router()
    router.add_route('/articles/{id}(.{format})', name='article')

    router.match('/articles/42.json').params
    # -> {'id': '42', 'format': 'json'}

    router.link_to('article', {'id': 42, 'format': 'html'})
    # -> '/articles/42.html'
"""

import logging as _logging

__all__ = (
    'create_link_builder',
    'compile_route',
    'create_router',
    'MatchData',
    'ParamSpec',
    'ParamMatcherError',
    'parse_url',
    'PatternSyntaxError',
    'Route',
    'Router',
    'RouterOptions',
)

from pointer.errors import ParamMatcherError
from pointer.errors import PatternSyntaxError
from pointer.router import create_link_builder
from pointer.router import create_router
from pointer.router import Router
from pointer.router import RouterOptions
from pointer.routing import compile_route
from pointer.routing import MatchData
from pointer.routing import ParamSpec
from pointer.routing import Route
from pointer.util.uri import parse_url

# Package version
from pointer.version import __version__  # NOQA: F401

# NOTE: Only to be used internally, for debug-level diagnostics about
#   route registration and unmatched lookups.
_logger = _logging.getLogger('pointer')
_logger.addHandler(_logging.NullHandler())
