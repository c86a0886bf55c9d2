"""Pytest configuration and fixtures for circuit simulator tests."""

import os

# Headless pygame for the UI tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from circuit import Circuit


@pytest.fixture
def circuit():
    return Circuit()


@pytest.fixture
def wired_circuit(circuit):
    """Board, button on D2 and LED on D10."""
    assert circuit.add_component("board", (200, 200))
    assert circuit.add_component("button", (50, 50))
    assert circuit.add_component("led", (100, 50))
    return circuit
