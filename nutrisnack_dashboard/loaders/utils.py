"""
Shared utilities for data ingestion: trailing windows and row validation.
"""

import datetime as dt
import logging
from typing import Iterable, Sequence, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def window_start(today: dt.date, days: int) -> str:
    """Inclusive ISO lower bound of the trailing ``days`` window ending today."""
    return (today - dt.timedelta(days=days)).isoformat()


def prior_window(today: dt.date, days: int) -> tuple[str, str]:
    """(inclusive start, exclusive end) of the window immediately preceding
    the trailing ``days`` window."""
    start = today - dt.timedelta(days=2 * days)
    end = today - dt.timedelta(days=days)
    return start.isoformat(), end.isoformat()


def validate_rows(
    rows: Iterable[dict],
    model: type[ModelT],
    required: Sequence[str] = (),
    source: str = "",
) -> list[ModelT]:
    """Parse raw rows into ``model``, dropping malformed ones.

    A row is rejected when any ``required`` column is missing or null, or
    when the model rejects a value. Rejections are logged, never raised.
    """
    records: list[ModelT] = []
    rejected = 0

    for row in rows:
        missing = [c for c in required if row.get(c) is None]
        if missing:
            rejected += 1
            logger.debug("Row from %s missing %s: %s", source, missing, row)
            continue
        try:
            records.append(model.model_validate(row))
        except ValidationError as e:
            rejected += 1
            logger.debug("Row from %s rejected: %s", source, e)

    if rejected:
        logger.warning("Dropped %d malformed rows from %s", rejected, source or model.__name__)
    return records
