# tuple_network.py
# N-tuple value function for the 4x4 tile game.

import numpy as np

from config import config, ConfigError

# Cell layout:
#  0  1  2  3
#  4  5  6  7
#  8  9 10 11
# 12 13 14 15
#
# Eight consecutive patterns share one table.
PATTERNS = np.array([
    (0, 1, 2, 4, 5, 6), (2, 3, 6, 7, 10, 11), (9, 10, 11, 13, 14, 15), (4, 5, 8, 9, 12, 13),
    (8, 9, 10, 12, 13, 14), (0, 1, 4, 5, 8, 9), (1, 2, 3, 5, 6, 7), (6, 7, 10, 11, 14, 15),

    (1, 2, 5, 6, 9, 13), (4, 5, 6, 7, 10, 11), (2, 6, 10, 14, 13, 9), (4, 5, 8, 9, 10, 11),
    (1, 2, 5, 6, 10, 14), (6, 7, 8, 9, 10, 11), (1, 5, 9, 10, 13, 14), (4, 5, 6, 7, 8, 9),

    (0, 1, 2, 3, 4, 5), (2, 6, 3, 7, 11, 15), (12, 13, 14, 15, 10, 11), (0, 4, 8, 12, 9, 13),
    (8, 9, 12, 13, 14, 15), (0, 1, 4, 5, 8, 12), (0, 1, 2, 3, 6, 7), (3, 7, 10, 11, 14, 15),

    # (5, 8, 9, 10, 15) was declared with five cells; the sixth defaults to cell 0.
    (0, 1, 6, 7, 8, 11), (3, 7, 6, 9, 10, 14), (5, 8, 9, 10, 15, 0), (1, 5, 6, 8, 9, 12),
    (6, 9, 10, 11, 12, 13), (0, 4, 5, 9, 10, 13), (2, 3, 4, 5, 6, 9), (2, 5, 6, 10, 11, 15),

    (0, 1, 2, 5, 9, 10), (3, 5, 6, 7, 9, 11), (5, 6, 10, 13, 14, 15), (4, 6, 8, 9, 10, 12),
    (5, 6, 9, 12, 13, 14), (0, 4, 5, 6, 8, 10), (1, 2, 3, 6, 9, 10), (5, 7, 9, 10, 11, 15),

    (0, 1, 5, 9, 13, 14), (3, 4, 5, 6, 7, 8), (1, 2, 6, 10, 14, 15), (7, 8, 9, 10, 11, 12),
    (1, 2, 5, 9, 12, 13), (0, 4, 5, 6, 7, 11), (2, 3, 6, 10, 13, 14), (4, 8, 9, 10, 11, 15),

    (0, 1, 5, 8, 9, 13), (1, 3, 4, 5, 6, 7), (2, 6, 7, 10, 14, 15), (8, 9, 10, 11, 12, 14),
    (1, 4, 5, 9, 12, 13), (0, 2, 4, 5, 6, 7), (2, 3, 6, 10, 11, 14), (8, 9, 10, 11, 13, 15),

    (0, 1, 2, 4, 6, 10), (2, 3, 7, 9, 10, 11), (5, 9, 11, 13, 14, 15), (4, 5, 6, 8, 12, 13),
    (2, 6, 8, 10, 12, 14), (0, 1, 4, 8, 9, 10), (1, 2, 3, 5, 7, 9), (5, 6, 7, 11, 14, 15),
], dtype=np.int64)


def digit_weights(length=config.TUPLE_LENGTH, base=config.TUPLE_BASE):
    """Positional weights, most significant digit first: (base**5, ..., base, 1)."""
    return base ** np.arange(length - 1, -1, -1, dtype=np.int64)


def feature_index(board, pattern, base=config.TUPLE_BASE) -> int:
    index = 0
    for cell in pattern:
        index = index * base + board(int(cell))
    return index


def decode_index(index: int, length=config.TUPLE_LENGTH, base=config.TUPLE_BASE):
    """Inverse of feature_index: the pattern's cell values, most significant first."""
    digits = []
    for _ in range(length):
        index, digit = divmod(index, base)
        digits.append(digit)
    return tuple(reversed(digits))


class FeatureNetwork:
    """
    K weight tables addressed by fixed 6-cell patterns. Pattern i reads table
    i // (len(patterns) // K). Values are float32 and unbounded.
    """
    def __init__(self, tables, patterns=PATTERNS, base=config.TUPLE_BASE):
        self.patterns = np.asarray(patterns, dtype=np.int64)
        self.base = base
        self.tables = [np.asarray(t, dtype=np.float32) for t in tables]
        if not self.tables:
            raise ConfigError("feature network needs at least one weight table")
        if len(self.patterns) % len(self.tables) != 0:
            raise ConfigError(f"{len(self.patterns)} patterns cannot be split over {len(self.tables)} tables")
        expected = base ** self.patterns.shape[1]
        for i, table in enumerate(self.tables):
            if table.ndim != 1 or table.size != expected:
                raise ConfigError(f"table {i} has {table.size} entries, expected {expected}")
        self.group_size = len(self.patterns) // len(self.tables)
        self._weights = digit_weights(self.patterns.shape[1], base)
        self._num_cells = int(self.patterns.max()) + 1

    @classmethod
    def from_sizes(cls, sizes, patterns=PATTERNS, base=config.TUPLE_BASE):
        return cls([np.zeros(size, dtype=np.float32) for size in sizes], patterns, base)

    def __len__(self):
        return len(self.tables)

    def indices(self, board) -> np.ndarray:
        """Feature index of every pattern, in pattern order."""
        cells = np.fromiter((board(i) for i in range(self._num_cells)), dtype=np.int64, count=self._num_cells)
        return cells[self.patterns] @ self._weights

    def _groups(self, indices):
        for t, table in enumerate(self.tables):
            yield table, indices[t * self.group_size:(t + 1) * self.group_size]

    def _value(self, indices) -> float:
        return float(sum(float(table[idx].sum()) for table, idx in self._groups(indices)))

    def evaluate(self, board) -> float:
        return self._value(self.indices(board))

    def update(self, board, target: float, alpha: float) -> float:
        """Moves every touched entry by alpha * error. Returns the error before the update."""
        indices = self.indices(board)
        error = target - self._value(indices)
        delta = np.float32(error * alpha)
        for table, idx in self._groups(indices):
            # Entries hit by several patterns receive delta once per hit.
            np.add.at(table, idx, delta)
        return error
