import logging
import sys

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handler: logging.Handler | None = None


def configure_logging(level: str = "INFO") -> None:
    """Install a single stdout handler on the root logger.

    Safe to call repeatedly; later calls only adjust the level.
    """
    global _handler
    root = logging.getLogger()
    lvl = logging.getLevelName(level.upper())
    if not isinstance(lvl, int):
        lvl = logging.INFO

    if _handler is None or _handler not in root.handlers:
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(_handler)
    root.setLevel(lvl)
