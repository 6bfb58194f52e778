"""Shared fake/mock objects for testing.

Centralized location for fake clients used across test suites.

Modules:
    m365 - FakeM365Client for SharePoint, Graph and Flow command testing
"""

from __future__ import annotations

from tests.fakes.m365 import FakeM365Client, make_page_client

__all__ = [
    "FakeM365Client",
    "make_page_client",
]
