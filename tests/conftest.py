"""Root pytest configuration for all tests."""

from __future__ import annotations

import pytest

from pinbridge.assuan import CommandDispatcher, CredentialGate, InfoProvider
from tests.utils import FakeBiometrics, FakeCache, FakePresenter


@pytest.fixture
def presenter() -> FakePresenter:
    return FakePresenter()


@pytest.fixture
def cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
def biometrics() -> FakeBiometrics:
    return FakeBiometrics()


@pytest.fixture
def dispatcher(
    presenter: FakePresenter, cache: FakeCache, biometrics: FakeBiometrics
) -> CommandDispatcher:
    return CommandDispatcher(
        presenter=presenter,
        gate=CredentialGate(cache, biometrics),
        info=InfoProvider("9.9.9", pid=4242),
    )
