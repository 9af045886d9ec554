import logging
from rich.console import Console
from rich.logging import RichHandler

def get_logger(name: str = "certsweep", verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        # keep stdout clean for --json output
        handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_time=True, show_path=False)
        fmt = logging.Formatter("%(message)s")
        handler.setFormatter(fmt)
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger
