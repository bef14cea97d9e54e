from enum import Enum
from typing import Any, Dict, Optional

DRAW = 'draw'


class Role(Enum):
    PLAYER1 = 'player1'
    PLAYER2 = 'player2'

    @property
    def other(self) -> 'Role':
        return Role.PLAYER2 if self is Role.PLAYER1 else Role.PLAYER1

    @classmethod
    def parse(cls, token) -> 'Role':
        """Turn a wire token ('player1'/'player2') into a Role.

        Raises ValueError for anything else.
        """
        if isinstance(token, Role):
            return token
        return cls(token)


class MatchStatus(Enum):
    IN_PROGRESS = 'in_progress'
    OVER = 'over'


class Cell:
    __slots__ = ('id', 'q', 'r', 'owner')

    def __init__(self, id: int, q: int, r: int, owner: Optional[Role] = None):
        self.id = id
        self.q = q
        self.r = r
        self.owner = owner

    @property
    def s(self) -> int:
        return -self.q - self.r

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'q': self.q,
            'r': self.r,
            'player': self.owner.value if self.owner else None,
        }

    def __repr__(self):
        return f"Cell(id={self.id}, q={self.q}, r={self.r}, owner={self.owner})"


class LobbyEntry:
    def __init__(self, id: str, username: str):
        self.id = id
        self.username = username

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'username': self.username,
        }


class Session:
    """Presence state of one connected participant."""

    def __init__(self, sid: str):
        self.sid = sid
        self.username: Optional[str] = None
        # role and match_id are set together while bound to a match
        self.role: Optional[Role] = None
        self.match_id: Optional[str] = None

    @property
    def in_match(self) -> bool:
        return self.match_id is not None

    def bind(self, match_id: str, role: Role) -> None:
        self.match_id = match_id
        self.role = role

    def unbind(self) -> None:
        self.match_id = None
        self.role = None


class MoveResult:
    def __init__(self, success: bool, reason: Optional[str] = None, state: Optional[Dict[str, Any]] = None):
        self.success = success
        self.reason = reason
        self.state = state

    @classmethod
    def ok(cls, state: Dict[str, Any]) -> 'MoveResult':
        return cls(True, state=state)

    @classmethod
    def fail(cls, reason: str) -> 'MoveResult':
        return cls(False, reason=reason)

    def __bool__(self):
        return self.success
