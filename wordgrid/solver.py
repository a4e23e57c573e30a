from __future__ import annotations

import concurrent.futures
import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field

from wordgrid.dictionary import Oracle, WordValidity
from wordgrid.grid import Grid, GridConfigError
from wordgrid.metrics import SearchStats

logger = logging.getLogger("wordgrid")


@dataclass
class SolveResult:
    words: set[str] = field(default_factory=set)
    # First path found for each word, as flat cell indices
    paths: dict[str, tuple[int, ...]] = field(default_factory=dict)
    complete: bool = True
    stats: SearchStats = field(default_factory=SearchStats)

    def add(self, word: str, path: tuple[int, ...]):
        if word not in self.paths:
            self.words.add(word)
            self.paths[word] = path

    def merge(self, other: SolveResult):
        for word, path in other.paths.items():
            self.add(word, path)
        self.complete = self.complete and other.complete
        self.stats.merge(other.stats)


class Solver:
    """Depth-first search for every dictionary word spelled along adjacent cells.

    A branch is abandoned as soon as the oracle reports that no word starts
    with the letters collected so far. The search runs on an explicit stack of
    neighbour iterators, one per path length, so grid size never hits the
    interpreter's recursion limit.

    Takes letters or an already built Grid. Letters that cannot form a square
    grid are logged and leave the solver with no grid; every solve then
    returns an empty result.
    """

    def __init__(self, letters: str | Grid, oracle: Oracle, min_length: int = 3):
        self.oracle = oracle
        self.min_length = min_length
        self.grid: Grid | None = None
        if isinstance(letters, Grid):
            self.grid = letters
            return
        try:
            self.grid = Grid(letters)
        except GridConfigError as e:
            logger.warning("Not a valid grid: %s", e)

    def solve(self, workers: int = 1, deadline: float | None = None) -> SolveResult:
        """Find all words.

        workers > 1 spreads the starting cells over a thread pool. deadline is
        a ``time.monotonic()`` timestamp after which the search stops early and
        the result is marked incomplete.
        """
        if self.grid is None:
            return SolveResult()

        if workers <= 1 or self.grid.size == 1:
            result = self._search(self.grid.neighbors(()), deadline)
        else:
            result = self._solve_parallel(workers, deadline)

        if not result.complete:
            logger.warning("Search deadline reached; %d words found so far", len(result.words))
        logger.info("Found %d words on %dx%d grid", len(result.words), self.grid.side, self.grid.side)
        return result

    def _solve_parallel(self, workers: int, deadline: float | None) -> SolveResult:
        starts = self.grid.neighbors(())
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._search, (start,), deadline) for start in starts]
            partials = [future.result() for future in futures]

        # Merge in start order so the recorded paths match a sequential run
        result = SolveResult()
        for partial in partials:
            result.merge(partial)
        return result

    def _search(self, starts: Iterable[int], deadline: float | None) -> SolveResult:
        grid = self.grid
        letters = grid.letters
        classify = self.oracle.classify
        min_length = self.min_length
        result = SolveResult()
        stats = result.stats

        path: list[int] = []
        in_use = [False] * grid.size
        prefixes = [""]
        pending = [iter(starts)]

        while pending:
            if deadline is not None and time.monotonic() >= deadline:
                result.complete = False
                break

            idx = next(pending[-1], None)
            if idx is None:
                # Branch exhausted: backtrack one cell
                pending.pop()
                if path:
                    in_use[path.pop()] = False
                    prefixes.pop()
                continue

            candidate = prefixes[-1] + letters[idx]
            validity = classify(candidate)
            stats.lookups += 1
            if validity is WordValidity.INVALID:
                stats.pruned += 1
                continue

            path.append(idx)
            in_use[idx] = True
            prefixes.append(candidate)

            if validity is WordValidity.REAL and len(candidate) >= min_length:
                result.add(candidate, tuple(path))

            stats.extended += 1
            if len(path) > stats.deepest:
                stats.deepest = len(path)
            pending.append(iter(grid.neighbors(path, in_use)))

        return result


def find_words(
    letters: str,
    oracle: Oracle,
    min_length: int = 3,
    workers: int = 1,
    deadline_seconds: float = 0,
) -> set[str]:
    """Convenience wrapper returning just the set of words found in letters."""
    deadline = time.monotonic() + deadline_seconds if deadline_seconds > 0 else None
    return Solver(letters, oracle, min_length).solve(workers, deadline).words
