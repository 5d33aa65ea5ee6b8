import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)-5s %(name)s: %(message)s"


def setup_logger(verbose: bool = False):
    """
    Configure the root logger once per process.
    Level comes from `ZKCHACHA_LOG` (default `INFO`), `verbose` forces `DEBUG`.
    """
    level = "DEBUG" if verbose else os.environ.get("ZKCHACHA_LOG", "INFO").upper()
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"

    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
