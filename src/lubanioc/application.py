"""Bootstrap entry point: build the context, resolve ``dao``, run its query."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from typing import Literal

from lubanioc.app import AppConfig
from lubanioc.context import ApplicationContext
from lubanioc.dao import Dao
from lubanioc.settings import AppSettings

Lookup = Literal["name", "type"]

logger = logging.getLogger(__name__)


def run(lookup: Lookup = "name", *, settings: AppSettings | None = None) -> None:
    """Resolve the ``dao`` bean once and call ``query`` on it once.

    Args:
        lookup: ``"name"`` resolves the bean by its name, ``"type"`` by the
            declared ``Dao`` type.
        settings: Settings to register in the context. Read from the
            environment when omitted.

    """
    with ApplicationContext(AppConfig, settings=settings) as context:
        dao = context.get_bean("dao", Dao) if lookup == "name" else context.get_bean(Dao)
        logger.debug("Resolved dao by %s: %r", lookup, dao)
        dao.query()


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="lubanioc",
        description="Resolve the 'dao' bean from AppConfig and run its query.",
    )
    parser.add_argument(
        "--lookup",
        choices=("name", "type"),
        default="name",
        help="resolve the bean by name (default) or by type",
    )
    args = parser.parse_args(argv)

    settings = AppSettings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    run(args.lookup, settings=settings)


def main_by_type() -> None:
    main(["--lookup", "type"])


if __name__ == "__main__":
    main()
