"""Pytest configuration and shared fixtures."""

import os

import django

import pytest

# Configure Django settings for tests
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "expiry_notifier.settings_test")
django.setup()


@pytest.fixture
def single_flight():
    """Provide a fresh single-flight guard."""
    from core.services.single_flight import SingleFlight  # noqa: PLC0415

    return SingleFlight()
