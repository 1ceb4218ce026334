"""Configures pytest further, shared fixtures included."""
import pytest

from pkeutils.rand import new_rand_state
from pkeutils.rand import RandState


def pytest_addoption(parser):
    parser.addoption("--skip-slow", action="store_true", default=False, help="skip slower tests")
    parser.addoption("--run-extreme", action="store_true", default=False, help="run extreme parameter set tests")


def pytest_collection_modifyitems(config, items):
    skipdict = {}
    if config.getoption("--skip-slow"):
        skipdict["slow"] = pytest.mark.skip(reason="Slow test: needs no --skip-slow option")
    if not config.getoption("--run-extreme"):
        skipdict["extreme"] = pytest.mark.skip(reason="Extreme test: needs --run-extreme option")
    if not skipdict:
        return
    for item in items:
        for k, v in skipdict.items():
            if k in item.keywords:
                item.add_marker(v)


@pytest.fixture
def rng() -> RandState:
    """A generator freshly seeded from the OS."""
    return new_rand_state(256)


@pytest.fixture(scope="module")
def module_rng() -> RandState:
    """A generator shared by the module-scoped key fixtures."""
    return new_rand_state(256)
