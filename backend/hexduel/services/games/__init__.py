"""Game domain: board geometry, move rules and the match state machine.

This package holds pure domain logic. It is driven by the session registry
and knows nothing about sockets or HTTP.
"""

from .board import Board, build_board, hex_distance, starting_positions
from .match import Match
from .rules import capture_around, legal_destinations, validate_move

__all__ = [
    'Board',
    'Match',
    'build_board',
    'capture_around',
    'hex_distance',
    'legal_destinations',
    'starting_positions',
    'validate_move',
]
