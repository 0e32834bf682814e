"""Holder for the latest content-database summary."""

from typing import Optional

import structlog

from ..domain.models import DbStats

logger = structlog.get_logger()


class MetadataTracker:
    """Keeps the most recent DbStats; every update replaces the previous one."""

    def __init__(self) -> None:
        self._stats: Optional[DbStats] = None

    @property
    def stats(self) -> Optional[DbStats]:
        return self._stats.model_copy(deep=True) if self._stats is not None else None

    def update(self, stats: DbStats) -> None:
        """Replace the held stats wholesale."""
        self._stats = stats.model_copy(deep=True)
        logger.info(
            "db_stats_updated",
            total_records=stats.total_records,
            types=list(stats.types),
        )

    def clear(self) -> None:
        """Forget the held stats."""
        self._stats = None
