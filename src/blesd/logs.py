from __future__ import annotations
import logging, sys
from typing import Optional

LOG_FORMAT = "[%(asctime)s.%(msecs)03d] %(levelname)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"

# stderr handler installed by the last setup_logging() call
_handler: Optional[logging.Handler] = None

def level_for(base: str, verbosity: int) -> int:
    """Resolve the effective root level from the configured name and -v count."""
    level = logging.getLevelName(str(base).upper())
    if not isinstance(level, int):
        level = logging.WARNING
    if verbosity >= 2:
        return min(level, logging.DEBUG)
    if verbosity == 1:
        return min(level, logging.INFO)
    return level

def setup_logging(level: int, bleak_level: Optional[str] = None) -> None:
    """Route diagnostics to stderr; stdout stays reserved for results."""
    global _handler
    root = logging.getLogger()
    # Replace the handler from a previous call (tests call main() repeatedly)
    if _handler is not None:
        root.removeHandler(_handler)
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    root.addHandler(_handler)
    root.setLevel(level)

    if bleak_level:
        bl = logging.getLevelName(bleak_level.upper())
        if isinstance(bl, int):
            logging.getLogger("bleak").setLevel(bl)
    elif level <= logging.DEBUG:
        logging.getLogger("bleak").setLevel(logging.DEBUG)
    else:
        # bleak is chatty at INFO on some backends
        logging.getLogger("bleak").setLevel(max(level, logging.WARNING))
