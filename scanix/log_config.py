"""Console logging setup. Call setup_logging() once at startup."""

import logging

_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"


def setup_logging(level: int | str = logging.INFO) -> None:
    """Configure the root logger with a single console handler.

    Safe to call multiple times; later calls only change the level.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers:
        if getattr(handler, "_scanix", False):
            handler.setLevel(level)
            return

    console = logging.StreamHandler()
    console._scanix = True
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(console)

    # Pillow logs every plugin it tries at DEBUG
    logging.getLogger("PIL").setLevel(logging.WARNING)
