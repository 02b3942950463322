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

"""Pattern compilation and single-route matching.

This package implements the route pattern lexer and parser, the
compilers that lower a pattern AST to a regular expression and to a
URL builder, and the :class:`Route` class tying them together.
"""

from pointer.routing.builder import create_builder
from pointer.routing.builder import GroupBuilder
from pointer.routing.builder import LiteralBuilder
from pointer.routing.builder import ParamBuilder
from pointer.routing.compiler import compile_pattern
from pointer.routing.compiler import CompiledPattern
from pointer.routing.compiler import declare_params
from pointer.routing.compiler import DEFAULT_PARAM_PATTERN
from pointer.routing.compiler import ParamSpec
from pointer.routing.pattern import LiteralNode
from pointer.routing.pattern import OptionalNode
from pointer.routing.pattern import ParamNode
from pointer.routing.pattern import parse
from pointer.routing.pattern import tokenize
from pointer.routing.route import MatchData
from pointer.routing.route import compile_route
from pointer.routing.route import Route
