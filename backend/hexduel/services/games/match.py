from typing import Any, Dict, Optional, Union

from hexduel.models import DRAW, MatchStatus, MoveResult, Role
from .board import DEFAULT_RADIUS, build_board, hex_distance
from .rules import capture_around, legal_destinations, validate_move

Winner = Union[Role, str, None]


class Match:
    """One game between two roles, from the opening layout to a result.

    The match does not know who its participants are; the registry resolves
    display names and passes them in for surrender and opponent-left.
    """

    def __init__(self, match_id: str, radius: int = DEFAULT_RADIUS):
        self.match_id = match_id
        self.radius = radius
        self.reset()

    def reset(self) -> None:
        self.board = build_board(self.radius)
        self.current_player = Role.PLAYER1
        self.status = MatchStatus.IN_PROGRESS
        self.winner: Winner = None
        self.opponent_left = False

    @property
    def game_over(self) -> bool:
        return self.status is MatchStatus.OVER

    def apply_move(self, from_id, to_id, player: Role) -> MoveResult:
        reason = validate_move(self.board, from_id, to_id, player, game_over=self.game_over)
        if reason:
            return MoveResult.fail(reason)

        from_cell = self.board.cell(from_id)
        to_cell = self.board.cell(to_id)
        if hex_distance(from_cell, to_cell) == 2:
            from_cell.owner = None
        to_cell.owner = player
        capture_around(self.board, to_cell, player)
        self.current_player = player.other
        self._check_game_over()
        return MoveResult.ok(self.snapshot())

    def has_legal_move(self, role: Role) -> bool:
        return any(legal_destinations(self.board, cell) for cell in self.board.owned_by(role))

    def _check_game_over(self) -> None:
        if self.has_legal_move(self.current_player):
            return
        self.status = MatchStatus.OVER
        p1 = self.board.count(Role.PLAYER1)
        p2 = self.board.count(Role.PLAYER2)
        if p1 > p2:
            self.winner = Role.PLAYER1
        elif p2 > p1:
            self.winner = Role.PLAYER2
        else:
            self.winner = DRAW

    def surrender(self, by_role: Role, opponent_name: Optional[str] = None) -> bool:
        """End the match in favour of the other side. No-op once over."""
        if self.game_over:
            return False
        self.status = MatchStatus.OVER
        self.winner = opponent_name or by_role.other
        return True

    def mark_opponent_left(self, leaver_role: Role, remaining_name: Optional[str] = None) -> bool:
        if self.game_over:
            return False
        self.status = MatchStatus.OVER
        self.opponent_left = True
        self.winner = remaining_name or leaver_role.other
        return True

    def snapshot(self) -> Dict[str, Any]:
        winner = self.winner.value if isinstance(self.winner, Role) else self.winner
        return {
            'board': self.board.to_list(),
            'currentPlayer': self.current_player.value,
            'gameOver': self.game_over,
            'winner': winner,
            'opponentLeft': self.opponent_left,
        }
