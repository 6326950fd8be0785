"""Shared fixtures for wayfinder tests."""

import pytest

from wayfinder.router import Router
from wayfinder.testing import MemoryNavigator, Recorder


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def calls() -> Recorder:
    return Recorder()


@pytest.fixture
def nav() -> MemoryNavigator:
    return MemoryNavigator()


@pytest.fixture
def router() -> Router:
    r = Router()
    r.define("id", r"(\d+)")
    return r
