import os
import logging
from logging.handlers import RotatingFileHandler

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

log = logging.getLogger("pyfastscale")
log.addHandler(logging.NullHandler())
console = None

_log_config = {"debug": False, "log_filename": None}


def str_to_bool(val: str | bool | None) -> bool | None:
    if isinstance(val, str):
        if val.strip() and val.strip().lower() in ("1", "true"):
            return True
        return False
    return val


def get_console():
    return console


def get_log():
    return log


def setup_logging(debug=None, filename=None):
    """Install a rich console handler (and optionally a rotating file handler) on the package logger."""
    global console  # pylint: disable=global-statement

    if debug is not None:
        _log_config["debug"] = debug
    elif str_to_bool(os.environ.get("PFS_DEBUG", None)):
        _log_config["debug"] = True
    if filename is not None:
        _log_config["log_filename"] = filename

    debug = _log_config["debug"]
    log_filename = _log_config["log_filename"]
    level = logging.DEBUG if debug else logging.INFO

    for handler in list(log.handlers):
        if not isinstance(handler, logging.NullHandler):
            log.removeHandler(handler)
            handler.close()

    console = Console(
        stderr=True,
        log_time=True,
        log_time_format="%H:%M:%S-%f",
        theme=Theme({
            "traceback.border": "black",
            "inspect.value.border": "black",
            "logging.level.debug": "blue dim",
        }),
    )
    rh = RichHandler(
        show_time=True,
        omit_repeated_times=False,
        show_level=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        log_time_format="%H:%M:%S-%f",
        level=level,
        console=console,
    )
    rh.set_name(logging.getLevelName(level))
    log.addHandler(rh)

    if log_filename:
        fh = RotatingFileHandler(log_filename, maxBytes=10 * 1024 * 1024, backupCount=2, encoding="utf-8", delay=True)
        fh.formatter = logging.Formatter("%(asctime)s | %(name)s | %(levelname)s | %(module)s | %(message)s")
        fh.setLevel(logging.DEBUG)
        log.addHandler(fh)

    log.setLevel(logging.DEBUG if debug else logging.INFO)
    log.propagate = False
    return log


__all__ = ["log", "setup_logging", "get_log", "get_console"]
