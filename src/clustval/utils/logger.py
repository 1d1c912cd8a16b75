import logging
import sys

DEFAULT_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def setup_logger(name: str = "clustval", level=logging.INFO, fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """
    Attach a single stdout handler to the named logger.

    The library itself only emits through module-level loggers and never
    configures handlers; this is for applications and notebooks that want
    clustval's log lines on stdout, e.g. setup_logger("clustval", logging.DEBUG)
    to see per-phase timings.

    Calling it again only updates the level and format; handlers are
    never duplicated.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    handler = next((h for h in logger.handlers if getattr(h, "_clustval", False)), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
        handler._clustval = True
        logger.addHandler(handler)

    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt="%H:%M:%S"))
    logger.propagate = False  # prevent double emission through root
    return logger
