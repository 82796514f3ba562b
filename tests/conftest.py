"""Test configuration and fixtures for the storefront API."""

from tests.fixtures import *  # noqa: F401,F403
