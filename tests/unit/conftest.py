"""Fixtures shared by the unit tests only."""

import pytest

from connectivity.services.connectivity_service import set_service


@pytest.fixture(autouse=True)
def _reset_default_service():
    yield
    set_service(None)
