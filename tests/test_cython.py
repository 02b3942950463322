import importlib
import re

import pytest

import pointer


class TestCythonized:
    @pytest.mark.parametrize(
        'module',
        [
            'pointer.routing.builder',
            'pointer.routing.compiler',
            'pointer.routing.pattern',
            'pointer.routing.route',
            'pointer.util.uri',
        ],
    )
    def test_imported_from_c_modules(self, util, module):
        if not util.IS_COMPILED:
            pytest.skip(reason='pointer was not compiled with Cython')

        assert not importlib.import_module(module).__file__.endswith('.py')

    def test_route_round_trip(self):
        route = pointer.Route(
            '/{name}(.{format})', {'name': re.compile('[a-z]+', re.IGNORECASE)}
        )

        assert route.match('/ABC.json').params == {'name': 'ABC', 'format': 'json'}
        assert route.build_url({'name': 'abc'}) == '/abc'
