import pytest

from comfytint import api_routes
from comfytint.utils.color_bridge import bridges


@pytest.fixture(autouse=True)
def _clear_bridges():
    bridges.clear()
    api_routes._registered = None
    yield
    bridges.clear()
    api_routes._registered = None
