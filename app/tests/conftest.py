"""Shared fixtures for intl_runtime tests."""

import pytest

from intl_runtime.configuration import get_settings


@pytest.fixture
def reset_settings():
    """Clear the cached settings before and after a test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
