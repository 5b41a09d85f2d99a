from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Dao(Protocol):
    """Data access object resolved by the bootstrap entry point."""

    def query(self) -> None: ...


class IndexDao:
    def __init__(self, datasource: str) -> None:
        self.datasource = datasource

    def query(self) -> None:
        logger.debug("Running query against datasource %r", self.datasource)
        print(f"dao query datasource={self.datasource}")
