"""Configuration descriptor handed to the application context at startup."""

from __future__ import annotations

from lubanioc.configuration import bean
from lubanioc.dao import Dao, IndexDao
from lubanioc.settings import AppSettings


class AppConfig:
    @bean
    def dao(self, settings: AppSettings) -> Dao:
        return IndexDao(datasource=settings.datasource)
