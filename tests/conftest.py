import pytest

from hookflow import HookflowConfig, set_config

from sample_contexts import Recorder


@pytest.fixture(autouse=True)
def default_config():
    """Pin package config so the environment can't leak into tests."""
    set_config(HookflowConfig())
    yield
    set_config(None)


@pytest.fixture
def recorder():
    return Recorder()
