"""Shared fixtures for pomo tests."""

import threading

import pytest

from pomo.clock import VirtualClock


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture
def cancel():
    return threading.Event()
