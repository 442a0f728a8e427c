import logging
import sys
from rich.highlighter import RegexHighlighter
from rich.logging import RichHandler


class BackTickHighlighter(RegexHighlighter):
    highlights = [r"`(?P<bold>[^`]*)`"]


def logger():
    return logging.getLogger("futura")


def configure_logger(debug: bool, rich: bool = True):
    """Attach a single handler to the `futura` logger.

    Task internals only log at DEBUG level (contained exceptions, retried
    handlers), so `debug` is what makes them visible.
    """
    handler: logging.Handler
    if rich:
        handler = RichHandler(show_path=debug, highlighter=BackTickHighlighter())
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))

    log = logger()
    log.handlers = [handler]
    log.setLevel(logging.DEBUG if debug else logging.INFO)
    log.propagate = False
