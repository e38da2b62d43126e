import logging
import time
from functools import wraps

logger = logging.getLogger(__name__)

# Generation defaults
ROW_BLOCK = 32  # Quad rows per tessellation task
MAX_STABILIZER_WIDTH = 4.0  # mm
HANGER_HALF_WIDTH = 4.5  # mm
HANGER_THICKNESS = 2.0  # mm
DEDUP_DECIMALS = 6  # Rounding used for vertex dedup keys


def timed(func):
    """Decorator to log the execution time of a function."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        t0 = time.perf_counter()
        result = func(*args, **kwargs)
        t1 = time.perf_counter()
        logger.debug(f"[TIMING] {func.__name__:25s}: {t1 - t0:0.3f}s")
        return result

    return wrapper
