"""Move legality and capture rules.

Both functions here operate on a Board in place or read-only; neither knows
about sessions, transport or turn bookkeeping.
"""

from typing import List, Optional

from hexduel.models import Cell, Role
from .board import Board, hex_distance

GAME_OVER = 'Game over'
INVALID_CELLS = 'Invalid cells'
NOT_YOUR_PIECE = 'Not your piece'
INVALID_MOVE = 'Invalid move'

MOVE_DISTANCES = (1, 2)


def legal_destinations(board: Board, from_cell: Cell) -> List[Cell]:
    """Unowned cells a piece on from_cell could clone or jump to."""
    return [
        cell for cell in board
        if cell.owner is None and hex_distance(from_cell, cell) in MOVE_DISTANCES
    ]


def validate_move(board: Board, from_id, to_id, player: Role, game_over: bool = False) -> Optional[str]:
    """Return None if the move is legal, else the rejection reason."""
    if game_over:
        return GAME_OVER
    from_cell = board.cell(from_id)
    to_cell = board.cell(to_id)
    if from_cell is None or to_cell is None:
        return INVALID_CELLS
    if from_cell.owner is not player:
        return NOT_YOUR_PIECE
    if to_cell.owner is not None or hex_distance(from_cell, to_cell) not in MOVE_DISTANCES:
        return INVALID_MOVE
    return None


def capture_around(board: Board, target: Cell, player: Role) -> List[Cell]:
    """Flip opponent cells adjacent to target over to player.

    One pass, no chaining: cells flipped here do not capture in turn.
    """
    flipped = []
    opponent = player.other
    for cell in board:
        if cell is target or cell.owner is not opponent:
            continue
        if hex_distance(target, cell) == 1:
            cell.owner = player
            flipped.append(cell)
    return flipped
