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

import sys

__all__ = (
    'PREFIX_ORDER_LEXICOGRAPHIC',
    'PREFIX_ORDER_LONGEST',
    'PREFIX_ORDERS',
    'WILDCARD',
)

PYTHON_VERSION = tuple(sys.version_info[:3])
"""Python version information triplet: (major, minor, micro)."""

POINTER_SUPPORTED = PYTHON_VERSION >= (3, 8, 0)
"""Whether this version of Pointer supports the current Python version."""

if not POINTER_SUPPORTED:  # pragma: nocover
    raise ImportError(
        'Pointer requires Python 3.8+. '
        '(Recent Pip should automatically pick a suitable Pointer version.)'
    )

WILDCARD = '*'
"""Marks an unspecified host, protocol, or prefix."""

PREFIX_ORDER_LEXICOGRAPHIC = 'lexicographic'
"""Try prefixes in descending string order (the default)."""

PREFIX_ORDER_LONGEST = 'longest'
"""Try longer prefixes first, ties broken by descending string order."""

PREFIX_ORDERS = frozenset((PREFIX_ORDER_LEXICOGRAPHIC, PREFIX_ORDER_LONGEST))
