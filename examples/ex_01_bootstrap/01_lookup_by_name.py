"""Bootstrap: build the context from ``AppConfig`` and fetch ``dao`` by name."""

from __future__ import annotations

from lubanioc import ApplicationContext, AppSettings
from lubanioc.app import AppConfig
from lubanioc.dao import Dao


def main() -> None:
    with ApplicationContext(AppConfig, settings=AppSettings(datasource="memory")) as context:
        dao = context.get_bean("dao", Dao)
        dao.query()  # => dao query datasource=memory

        print(f"bean_names={context.bean_names()}")  # => bean_names=['dao']


if __name__ == "__main__":
    main()
