"""Shared pytest fixtures for lubanioc tests."""

from collections.abc import Iterator

import pytest

from lubanioc.app import AppConfig
from lubanioc.context import ApplicationContext
from lubanioc.settings import AppSettings


@pytest.fixture()
def settings() -> AppSettings:
    """Settings with a recognizable datasource."""
    return AppSettings(datasource="test-db")


@pytest.fixture()
def context(settings: AppSettings) -> Iterator[ApplicationContext]:
    """Refreshed context built from the application configuration."""
    with ApplicationContext(AppConfig, settings=settings) as context:
        yield context
