import logging

__log_format__ = "%(levelname)8s %(name)s: %(message)s"


def configure_logging(verbose=False):
    """Send safe-rebase diagnostics to stderr; DEBUG when verbose, else warnings only."""
    logger = logging.getLogger("safe_rebase")
    if not any(getattr(h, "_safe_rebase", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(__log_format__))
        handler._safe_rebase = True
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger
