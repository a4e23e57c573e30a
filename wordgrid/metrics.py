import logging
import time
from contextlib import contextmanager
from dataclasses import asdict, dataclass

logger = logging.getLogger("wordgrid")


@dataclass
class SearchStats:
    """Work done by one grid search."""

    lookups: int = 0    # candidates sent to the oracle
    pruned: int = 0     # candidates the oracle ruled out
    extended: int = 0   # paths the search went deeper from
    deepest: int = 0    # longest path reached

    def merge(self, other: "SearchStats"):
        self.lookups += other.lookups
        self.pruned += other.pruned
        self.extended += other.extended
        self.deepest = max(self.deepest, other.deepest)

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


class StageTimer:
    """Per-stage timing for one solve, plus the search counters of its solve stage."""

    def __init__(self):
        self.timings: dict[str, float] = {}
        self.search = SearchStats()
        self._start = time.perf_counter()

    @contextmanager
    def stage(self, name: str):
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.timings[name] = round((time.perf_counter() - t0) * 1000, 1)  # ms
            logger.info("stage=%s elapsed=%.1fms", name, self.timings[name])

    def record_search(self, stats: SearchStats):
        self.search.merge(stats)
        logger.info(
            "search lookups=%d pruned=%d extended=%d deepest=%d",
            stats.lookups, stats.pruned, stats.extended, stats.deepest,
        )

    @property
    def total_ms(self) -> float:
        return round((time.perf_counter() - self._start) * 1000, 1)

    def summary(self) -> dict:
        return {**self.timings, "total": self.total_ms}
