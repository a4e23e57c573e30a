from __future__ import annotations

import math
from collections.abc import Sequence

# (row, col) offsets in the order neighbours are offered to the search
_OFFSETS = (
    (-1, 0),   # above
    (-1, -1),  # above left
    (-1, 1),   # above right
    (0, -1),   # left
    (0, 1),    # right
    (1, 0),    # below
    (1, -1),   # below left
    (1, 1),    # below right
)


class GridConfigError(ValueError):
    """Raised when the letters cannot form a square grid."""


class Grid:
    """A square grid of lowercase letters addressed by flat cell index."""

    __slots__ = ("letters", "side", "size", "_adjacent")

    def __init__(self, letters: str):
        letters = letters.lower()
        side = math.isqrt(len(letters))
        if side * side != len(letters) or not letters:
            raise GridConfigError(f"{len(letters)} letters do not form a square grid")

        self.letters = letters
        self.side = side
        self.size = len(letters)

        # Precompute adjacency lists
        self._adjacent: list[tuple[int, ...]] = []
        for idx in range(self.size):
            r, c = divmod(idx, side)
            adj = []
            for dr, dc in _OFFSETS:
                nr, nc = r + dr, c + dc
                if 0 <= nr < side and 0 <= nc < side:
                    adj.append(nr * side + nc)
            self._adjacent.append(tuple(adj))

    def __repr__(self) -> str:
        return f"Grid({self.letters!r})"

    def rows(self) -> list[str]:
        return [self.letters[i:i + self.side] for i in range(0, self.size, self.side)]

    def position(self, index: int) -> tuple[int, int]:
        return divmod(index, self.side)

    def adjacent(self, index: int) -> tuple[int, ...]:
        """All cells touching index by an edge or a corner."""
        return self._adjacent[index]

    def neighbors(self, path: Sequence[int], in_use: Sequence[bool] | None = None) -> list[int]:
        """Legal next cells for path.

        An empty path may start anywhere. Otherwise the cells adjacent to the
        path's last cell that the path has not used yet. ``in_use`` is an
        optional per-cell flag array mirroring ``path`` for callers that keep
        one, which saves a scan of the path per candidate.
        """
        if not path:
            return list(range(self.size))
        if in_use is None:
            used = set(path)
            return [idx for idx in self._adjacent[path[-1]] if idx not in used]
        return [idx for idx in self._adjacent[path[-1]] if not in_use[idx]]

    def spell(self, path: Sequence[int]) -> str:
        return "".join(self.letters[idx] for idx in path)
