from __future__ import annotations

import logging
import os


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # aiosqlite logs every statement at DEBUG.
    logging.getLogger("aiosqlite").setLevel(logging.INFO)


def use_color() -> bool:
    if os.environ.get("NO_COLOR") is not None:
        return False
    return os.environ.get("CLICOLOR") != "0"
