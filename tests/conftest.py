import re

import pytest

import pointer
import pointer.routing.compiler
from pointer.routing import LiteralNode
from pointer.routing import OptionalNode
from pointer.routing import ParamNode


@pytest.fixture
def router():
    return pointer.Router(
        {
            '/articles/{id}(-{slug}(-{page}))(.{format})': {
                'name': 'article',
                'params': {'page': re.compile(r'\d+?'), 'format': 'html'},
            },
            '/articles/{id}(-{page})(.{format})': {
                'name': 'article',
                'params': {'page': re.compile(r'\d+?'), 'format': 'html'},
            },
            '/posts/{year}(-{month}(-{day}))-{slug}.html': {
                'name': 'post',
                'params': {
                    'year': re.compile(r'\d+'),
                    'month': re.compile(r'\d+'),
                    'day': re.compile(r'\d+'),
                },
            },
            '/{year}-{month}-{day}.html': {
                'name': 'post',
                'prefix': '/blog',
            },
        }
    )


class _SuiteUtils:
    """Assorted helpers shared across the test suite."""

    # NOTE: Set when setup.py compiled the package with Cython.
    IS_COMPILED = not pointer.routing.compiler.__file__.endswith('.py')

    @staticmethod
    def map_nodes(nodes):
        """Reduce an AST to its shape, e.g. ``['s', 'p', ['s', 'p']]``."""

        shape = []

        for node in nodes:
            if isinstance(node, LiteralNode):
                shape.append('s')
            elif isinstance(node, ParamNode):
                shape.append('p')
            elif isinstance(node, OptionalNode):
                shape.append(_SuiteUtils.map_nodes(node.children))
            else:
                shape.append('!')

        return shape


@pytest.fixture(scope='session')
def util():
    return _SuiteUtils()
