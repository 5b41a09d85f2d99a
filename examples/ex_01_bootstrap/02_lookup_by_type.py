"""Bootstrap: same as by-name lookup, but fetch the bean by its declared type."""

from __future__ import annotations

from lubanioc import ApplicationContext, AppSettings
from lubanioc.app import AppConfig
from lubanioc.dao import Dao


def main() -> None:
    with ApplicationContext(AppConfig, settings=AppSettings(datasource="memory")) as context:
        dao = context.get_bean(Dao)
        dao.query()  # => dao query datasource=memory

        print(f"same_as_named={dao is context.get_bean('dao')}")  # => same_as_named=True


if __name__ == "__main__":
    main()
