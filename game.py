# game.py
# Narrow views of the external rules engines. Boards are owned by the caller;
# agents only copy them, read cells and apply actions.

from typing import NamedTuple, Protocol

EMPTY, BLACK, WHITE = 0, 1, 2
ROLES = {"black": BLACK, "white": WHITE}

# Slide reward reserved for an illegal move.
ILLEGAL = -1


class TileBoard(Protocol):
    """place() is used by environment agents whose Place actions the runner applies."""
    def copy(self) -> "TileBoard": ...
    def slide(self, op: int) -> int: ...
    def place(self, position: int, tile: int) -> int: ...
    def __call__(self, index: int) -> int: ...


class PlacementBoard(Protocol):
    size: int
    def copy(self) -> "PlacementBoard": ...
    def place(self, position: int, piece: int) -> bool: ...


def opponent_of(piece: int) -> int:
    return WHITE if piece == BLACK else BLACK


class Slide(NamedTuple):
    op: int

    def apply(self, board):
        return board.slide(self.op)

    def is_legal(self, result) -> bool:
        return result != ILLEGAL


class Place(NamedTuple):
    position: int
    piece: int

    def apply(self, board):
        return board.place(self.position, self.piece)

    def is_legal(self, result) -> bool:
        # Placement boards answer a bool, tile boards a reward.
        return result is not False and result != ILLEGAL


def placement_space(size: int, piece: int):
    return [Place(i, piece) for i in range(size)]
