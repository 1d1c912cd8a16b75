import logging
import time
from contextlib import contextmanager

logger = logging.getLogger(__name__)


@contextmanager
def catch_time(task_name: str = "operation", level: int = logging.DEBUG):
    """Log how long the wrapped block took; failures are logged and re-raised."""
    start = time.perf_counter()
    try:
        yield
    except Exception as e:
        duration = time.perf_counter() - start
        logger.error(f"{task_name} failed after {duration:.3f}s: {e}")
        raise
    duration = time.perf_counter() - start
    logger.log(level, f"{task_name} completed in {duration:.3f}s")
