"""Session registry: who is connected, who is in the lobby, who plays whom.

The registry is the only component that touches more than one participant at
a time. It owns the sessions, the lobby, pending challenges and the arena of
live matches, and pushes every resulting update through a notifier:

    notifier.send(sid, event, data)      -> one connection
    notifier.broadcast(event, data)      -> every connection

All public methods take the registry lock, so handlers dispatched on
different threads are applied one at a time and every outbound payload is
built from a consistent state.
"""

import logging
import threading
import uuid
from typing import Any, Dict, List, Optional, Set, Tuple

from hexduel.models import LobbyEntry, Role, Session
from hexduel.services.games.board import DEFAULT_RADIUS
from hexduel.services.games.match import Match
from hexduel.services.games.rules import NOT_YOUR_PIECE

NO_ACTIVE_MATCH = 'No active match'


class SessionRegistry:
    def __init__(self, notifier, radius: int = DEFAULT_RADIUS, disconnect_forfeits: bool = True, logger=None):
        self.notifier = notifier
        self.radius = radius
        self.disconnect_forfeits = disconnect_forfeits
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.RLock()
        self._sessions: Dict[str, Session] = {}
        # insertion ordered; keyed by sid so re-joins update in place
        self._lobby: Dict[str, LobbyEntry] = {}
        self._challenges: Set[Tuple[str, str]] = set()  # (challenger, target)
        self._matches: Dict[str, Match] = {}
        self._members: Dict[str, List[str]] = {}  # match_id -> bound sids

    # ---- read accessors ----

    def session(self, sid: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(sid)

    def match_for(self, sid: str) -> Optional[Match]:
        with self._lock:
            session = self._sessions.get(sid)
            if not session or not session.match_id:
                return None
            return self._matches.get(session.match_id)

    def lobby_snapshot(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [entry.to_dict() for entry in self._lobby.values()]

    def match_snapshot(self, match_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            match = self._matches.get(match_id)
            return match.snapshot() if match else None

    def pending_challenges(self) -> Set[Tuple[str, str]]:
        with self._lock:
            return set(self._challenges)

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                'sessions': len(self._sessions),
                'lobby': len(self._lobby),
                'matches': len(self._matches),
            }

    # ---- lobby ----

    def connect(self, sid: str) -> Session:
        with self._lock:
            session = self._sessions.get(sid)
            if session is None:
                session = Session(sid)
                self._sessions[sid] = session
            self.logger.info(f"[connect] sid={sid}")
            return session

    def join_lobby(self, sid: str, username: str) -> None:
        with self._lock:
            session = self._ensure_session(sid)
            session.username = username
            if session.in_match:
                # name change only; the lobby lists unmatched sessions
                self.logger.info(f"[join-lobby] sid={sid} in match={session.match_id}, name updated")
            elif sid in self._lobby:
                self._lobby[sid].username = username
            else:
                self._lobby[sid] = LobbyEntry(sid, username)
            self._broadcast_lobby()

    def challenge(self, sid: str, target_id: str) -> None:
        with self._lock:
            challenger = self._ensure_session(sid)
            target = self._sessions.get(target_id)
            if target is None or target_id == sid:
                self.logger.info(f"[challenge-drop] from={sid} target={target_id} unknown")
                return
            self._challenges.add((sid, target_id))
            self.notifier.send(target_id, 'challengeReceived', {
                'challengerId': sid,
                'challengerName': challenger.username,
            })

    def accept(self, sid: str, challenger_id: str) -> Optional[str]:
        """Start a match between challenger (player1) and sid (player2).

        Returns the new match id, or None if the accept was stale.
        """
        with self._lock:
            accepter = self._sessions.get(sid)
            challenger = self._sessions.get(challenger_id)
            if accepter is None or challenger is None:
                self.logger.info(f"[accept-drop] sid={sid} challenger={challenger_id} unknown session")
                return None
            if (challenger_id, sid) not in self._challenges:
                self.logger.info(f"[accept-drop] sid={sid} challenger={challenger_id} no pending challenge")
                return None
            if accepter.in_match or challenger.in_match:
                self.logger.info(f"[accept-drop] sid={sid} challenger={challenger_id} already in a match")
                self._challenges.discard((challenger_id, sid))
                return None

            self._lobby.pop(sid, None)
            self._lobby.pop(challenger_id, None)
            self._drop_challenges(sid)
            self._drop_challenges(challenger_id)

            match_id = uuid.uuid4().hex
            match = Match(match_id, radius=self.radius)
            self._matches[match_id] = match
            self._members[match_id] = [challenger_id, sid]
            challenger.bind(match_id, Role.PLAYER1)
            accepter.bind(match_id, Role.PLAYER2)

            players = {
                Role.PLAYER1.value: challenger.username,
                Role.PLAYER2.value: accepter.username,
            }
            state = match.snapshot()
            for member in (challenger, accepter):
                self.notifier.send(member.sid, 'matchStarted', dict(state, players=players, yourRole=member.role.value))
            self.logger.info(
                f"[match-start] match={match_id} player1={challenger_id} player2={sid}"
            )
            self._broadcast_lobby()
            return match_id

    def decline(self, sid: str, challenger_id: str) -> None:
        with self._lock:
            self._challenges.discard((challenger_id, sid))
            if challenger_id not in self._sessions:
                return
            self.notifier.send(challenger_id, 'challengeDeclined', {'from': sid})

    # ---- match routing ----

    def make_move(self, sid: str, from_id, to_id, player=None) -> bool:
        with self._lock:
            session = self._sessions.get(sid)
            match = self.match_for(sid)
            if match is None:
                self.notifier.send(sid, 'invalidMove', NO_ACTIVE_MATCH)
                return False
            if player is not None:
                try:
                    claimed = Role.parse(player)
                except ValueError:
                    claimed = None
                if claimed is not session.role:
                    self.notifier.send(sid, 'invalidMove', NOT_YOUR_PIECE)
                    return False

            result = match.apply_move(from_id, to_id, session.role)
            if not result:
                self.logger.debug(f"[move-rejected] match={match.match_id} sid={sid} reason={result.reason}")
                self.notifier.send(sid, 'invalidMove', result.reason)
                return False

            self.logger.info(f"[move] match={match.match_id} role={session.role.value} from={from_id} to={to_id}")
            if match.game_over:
                self.logger.info(f"[game-over] match={match.match_id} winner={result.state['winner']}")
            self._emit_to_members(match.match_id, 'gameState', result.state)
            return True

    def surrender(self, sid: str) -> bool:
        with self._lock:
            session = self._sessions.get(sid)
            match = self.match_for(sid)
            if match is None:
                return False
            opponent = self._opponent_of(session)
            if not match.surrender(session.role, opponent.username if opponent else None):
                return False
            self.logger.info(f"[surrender] match={match.match_id} sid={sid}")
            self._emit_to_members(match.match_id, 'gameState', match.snapshot())
            return True

    def leave(self, sid: str) -> None:
        with self._lock:
            session = self._sessions.get(sid)
            if session is None or not session.in_match:
                return
            self._leave_match(session)
            self._lobby[sid] = LobbyEntry(sid, session.username)
            self._broadcast_lobby()

    def reset(self, sid: str) -> bool:
        with self._lock:
            match = self.match_for(sid)
            if match is None:
                return False
            match.reset()
            self.logger.info(f"[reset] match={match.match_id} sid={sid}")
            self._emit_to_members(match.match_id, 'gameState', match.snapshot())
            return True

    def disconnect(self, sid: str) -> None:
        with self._lock:
            session = self._sessions.get(sid)
            if session is not None and session.in_match:
                if self.disconnect_forfeits:
                    self._leave_match(session)
                else:
                    self._unbind(session)
            self._lobby.pop(sid, None)
            self._drop_challenges(sid)
            self._sessions.pop(sid, None)
            self.logger.info(f"[disconnect] sid={sid}")
            self._broadcast_lobby()

    # ---- internals (lock held) ----

    def _ensure_session(self, sid: str) -> Session:
        session = self._sessions.get(sid)
        if session is None:
            session = Session(sid)
            self._sessions[sid] = session
        return session

    def _opponent_of(self, session: Session) -> Optional[Session]:
        for member_sid in self._members.get(session.match_id, []):
            if member_sid != session.sid:
                return self._sessions.get(member_sid)
        return None

    def _leave_match(self, session: Session) -> None:
        match = self._matches.get(session.match_id)
        opponent = self._opponent_of(session)
        if match is not None and match.mark_opponent_left(session.role, opponent.username if opponent else None):
            self.logger.info(f"[leave] match={match.match_id} sid={session.sid} winner={match.winner}")
            if opponent is not None:
                self.notifier.send(opponent.sid, 'gameState', match.snapshot())
        self._unbind(session)

    def _unbind(self, session: Session) -> None:
        match_id = session.match_id
        session.unbind()
        members = self._members.get(match_id)
        if members is None:
            return
        if session.sid in members:
            members.remove(session.sid)
        if not members:
            self._members.pop(match_id, None)
            self._matches.pop(match_id, None)
            self.logger.info(f"[match-end] match={match_id} released")

    def _drop_challenges(self, sid: str) -> None:
        self._challenges = {pair for pair in self._challenges if sid not in pair}

    def _emit_to_members(self, match_id: str, event: str, data: Dict[str, Any]) -> None:
        for member_sid in self._members.get(match_id, []):
            self.notifier.send(member_sid, event, data)

    def _broadcast_lobby(self) -> None:
        self.notifier.broadcast('lobbyUpdate', [entry.to_dict() for entry in self._lobby.values()])
