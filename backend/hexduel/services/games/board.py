from typing import Dict, Iterator, List, Optional, Tuple

from hexduel.models import Cell, Role

DEFAULT_RADIUS = 4


def hex_distance(a: Cell, b: Cell) -> int:
    """Axial hex distance: (|dq| + |dr| + |dq + dr|) / 2."""
    dq = a.q - b.q
    dr = a.r - b.r
    return (abs(dq) + abs(dr) + abs(dq + dr)) // 2


def starting_positions(radius: int) -> Dict[Role, List[Tuple[int, int]]]:
    """Alternating corners of the hex; each player holds three of the six."""
    n = radius
    return {
        Role.PLAYER1: [(-n, 0), (n, -n), (0, n)],
        Role.PLAYER2: [(n, 0), (-n, n), (0, -n)],
    }


class Board:
    """Cells of one hex board of a fixed radius, in generation order."""

    def __init__(self, radius: int, cells: List[Cell]):
        self.radius = radius
        self.cells = cells
        self._by_id = {cell.id: cell for cell in cells}
        self._by_coord = {(cell.q, cell.r): cell for cell in cells}

    def __len__(self):
        return len(self.cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def cell(self, cell_id) -> Optional[Cell]:
        return self._by_id.get(cell_id)

    def at(self, q: int, r: int) -> Optional[Cell]:
        return self._by_coord.get((q, r))

    def owned_by(self, role: Role) -> List[Cell]:
        return [cell for cell in self.cells if cell.owner is role]

    def count(self, role: Role) -> int:
        return sum(1 for cell in self.cells if cell.owner is role)

    def to_list(self) -> List[dict]:
        return [cell.to_dict() for cell in self.cells]


def build_board(radius: int = DEFAULT_RADIUS) -> Board:
    """Build a board of the given radius with the starting pieces placed.

    Ids ascend in generation order: q from -N to N, and for each q, r from
    max(-N, -q-N) to min(N, -q+N).
    """
    n = radius
    cells = []
    next_id = 0
    for q in range(-n, n + 1):
        for r in range(max(-n, -q - n), min(n, -q + n) + 1):
            cells.append(Cell(next_id, q, r))
            next_id += 1
    board = Board(radius, cells)

    for role, positions in starting_positions(radius).items():
        for q, r in positions:
            cell = board.at(q, r)
            if cell is not None:
                cell.owner = role
    return board
