"""Test factories and fakes."""

from tests.factories.web import FakeWeb

__all__ = ["FakeWeb"]
