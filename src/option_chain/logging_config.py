import logging
import sys


def configure_logging(level='INFO'):
    """Configure logging for the application."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, '_option_chain', False):
            root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stdout)
    handler._option_chain = True
    formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    handler.setFormatter(formatter)
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)


__all__ = ['configure_logging']
