"""Translate document store errors into DataAccessFailure."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from calorie_tracker.domain.errors import CalorieTrackerError, DataAccessFailure

_logger = logging.getLogger(__name__)


@contextmanager
def data_access(operation: str) -> Iterator[None]:
    """Wrap a store call so failures surface as DataAccessFailure."""
    try:
        yield
    except CalorieTrackerError:
        raise
    except Exception as exc:
        _logger.exception("Data store %s failed", operation)
        raise DataAccessFailure(operation, exc) from exc
