"""Shared pytest fixtures for all tests."""

from pathlib import Path

import pytest

from pi_gpio.controller import GPIOController
from pi_gpio.gpio_admin import MockGPIOAdmin, get_gpio_admin


@pytest.fixture
def mock_admin(tmp_path: Path) -> MockGPIOAdmin:
    """Provide a MockGPIOAdmin faking the sysfs tree under a temporary directory.

    Returns:
        MockGPIOAdmin rooted at tmp_path
    """
    admin = get_gpio_admin(mock=True, root=tmp_path)
    assert isinstance(admin, MockGPIOAdmin)
    return admin


@pytest.fixture
def controller(mock_admin: MockGPIOAdmin) -> GPIOController:
    """Provide a controller wired to the mock helper."""
    return GPIOController(mock_admin, mock_admin.root)
