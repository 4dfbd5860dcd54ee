# -*- coding: utf-8 -*-

import pytest

from vow.common import config


@pytest.fixture(autouse=True)
def default_config(request):
    """Restore the default settings after each test."""
    request.addfinalizer(config.reset)


@pytest.fixture(params=[False, True], ids=['recursive', 'iterative'])
def drain_mode(request):
    """Run the test once with each mode of execution of the callbacks."""
    config.set('iterative_drain', request.param)
    return request.param
