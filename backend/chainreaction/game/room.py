import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from .board import Board, ExplosionEvent
from .errors import (
    AlreadyStarted,
    CellAtCapacity,
    CellOwnershipConflict,
    GameNotInProgress,
    InsufficientPlayers,
    NotPlayersTurn,
    SpectatorForbidden,
)
from .player import Player

log = logging.getLogger(__name__)

LOBBY = 'lobby'
PLAYING = 'playing'
FINISHED = 'finished'

PLAYER_COLORS = [
    '#FF6B6B',  # Red
    '#4ECDC4',  # Teal
    '#45B7D1',  # Blue
    '#96CEB4',  # Green
    '#FECA57',  # Yellow
    '#DDA0DD',  # Plum
    '#FF8C00',  # Orange
    '#9370DB',  # Purple
    '#20B2AA',  # Light sea green
    '#FF69B4',  # Hot pink
]


@dataclass(frozen=True)
class GameOver:
    """Terminal outcome of a game; ``winner`` is None for a draw."""
    winner: Optional[Player]


@dataclass
class TurnResult:
    events: List[ExplosionEvent] = field(default_factory=list)
    eliminated: List[Player] = field(default_factory=list)
    outcome: Optional[GameOver] = None


class GameRoom:
    """One game: roster, board, turn order and the lobby -> playing -> finished lifecycle.

    Every method runs to completion without suspending. Callers serialize
    access per room (see ``RoomRegistry.lock``).
    """

    def __init__(self, room_id: str, rows: int = 6, cols: int = 10, rng=None,
                 min_players: int = 2, seed_tokens: int = 3, seed_attempts: int = 100):
        self.id = room_id
        self.players: List[Player] = []
        self.board = Board(rows, cols)
        self.state = LOBBY
        self.current_player_index = 0
        self.winner: Optional[Player] = None
        self.created_at = datetime.now(timezone.utc)
        self.min_players = min_players
        self.seed_tokens = seed_tokens
        self.seed_attempts = seed_attempts
        self._rng = rng or random.Random()

    # ---- roster ----

    def player_by_connection(self, connection_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.connection_id == connection_id), None)

    def active_players(self) -> List[Player]:
        return [p for p in self.players if p.is_active]

    def non_spectators(self) -> List[Player]:
        return [p for p in self.players if not p.is_spectator]

    def spectators(self) -> List[Player]:
        return [p for p in self.players if p.is_spectator]

    def current_player(self) -> Optional[Player]:
        if 0 <= self.current_player_index < len(self.players):
            return self.players[self.current_player_index]
        return None

    def add_player(self, connection_id: str, name: str, is_spectator: bool = False) -> Player:
        existing = self.player_by_connection(connection_id)
        if existing:
            return existing

        player = Player(connection_id, name, is_spectator)
        if not is_spectator and self.state == LOBBY:
            player.color = self._next_color()
        elif not is_spectator:
            # Late joiners hold no territory, so they are out of the running game
            player.is_eliminated = True
        self.players.append(player)
        log.info(f"[join] room={self.id} player={player.id} spectator={is_spectator} color={player.color}")
        return player

    def _next_color(self) -> str:
        taken = {p.color for p in self.players if not p.is_spectator}
        for color in PLAYER_COLORS:
            if color not in taken:
                return color
        # Palette exhausted: reuse by roster position
        return PLAYER_COLORS[len(self.players) % len(PLAYER_COLORS)]

    def remove_player(self, connection_id: str) -> Optional[Player]:
        index = next(
            (i for i, p in enumerate(self.players) if p.connection_id == connection_id), None
        )
        if index is None:
            return None

        player = self.players.pop(index)
        if index < self.current_player_index:
            # Keep the turn with the same player after survivors shift down
            self.current_player_index -= 1
        if self.current_player_index >= len(self.players):
            self.current_player_index = 0
        if self.state == PLAYING:
            self._ensure_current_active()
        log.info(f"[leave] room={self.id} player={player.id} remaining={len(self.players)}")
        return player

    # ---- lifecycle ----

    def start_game(self) -> None:
        if self.state != LOBBY:
            raise AlreadyStarted()
        if len(self.non_spectators()) < self.min_players:
            raise InsufficientPlayers(f'Need at least {self.min_players} players to start')

        self.board.reset()
        for player in self.players:
            player.reset()
        self.winner = None
        self.state = PLAYING
        self.current_player_index = 0
        self._ensure_current_active()
        self._seed_initial_tokens()
        log.info(f"[start] room={self.id} players={len(self.active_players())}")

    def _seed_initial_tokens(self) -> None:
        for player in self.active_players():
            placed = 0
            for _ in range(self.seed_tokens):
                for _attempt in range(self.seed_attempts):
                    row = self._rng.randrange(self.board.rows)
                    col = self._rng.randrange(self.board.cols)
                    try:
                        self.board.place_token(row, col, player.id)
                    except (CellOwnershipConflict, CellAtCapacity):
                        continue
                    placed += 1
                    break
            if placed < self.seed_tokens:
                log.warning(f"[seed] room={self.id} player={player.id} placed {placed}/{self.seed_tokens}")

    def place_token(self, row: int, col: int, player_id: str):
        if self.state != PLAYING:
            raise GameNotInProgress()
        return self.board.place_token(row, col, player_id)

    def resolve(self) -> List[ExplosionEvent]:
        """Run the chain reaction until no cell that has not yet exploded is at capacity.

        Each position explodes at most once per run, so a run performs at most
        ``rows * cols`` explosions. A cell refilled after exploding keeps its
        overflow until the next run.
        """
        events: List[ExplosionEvent] = []
        exploded = set()
        while True:
            pending = [pos for pos in self.board.settled_candidates() if pos not in exploded]
            if not pending:
                break
            for row, col in pending:
                exploded.add((row, col))
                # An earlier explosion in this pass may have captured the cell
                owner = self.board.cells[row][col].owner
                events.extend(self.board.explode(row, col, owner))
        return events

    def detect_eliminated(self) -> List[Player]:
        eliminated = []
        for player in self.players:
            if player.is_spectator or player.is_eliminated:
                continue
            if not self.board.cells_owned_by(player.id):
                player.is_eliminated = True
                eliminated.append(player)
        return eliminated

    def detect_winner(self) -> Optional[GameOver]:
        active = self.active_players()
        if len(active) == 1:
            self.winner = active[0]
            self.state = FINISHED
            log.info(f"[finish] room={self.id} winner={self.winner.id}")
            return GameOver(self.winner)
        if not active:
            self.state = FINISHED
            log.info(f"[finish] room={self.id} draw")
            return GameOver(None)
        return None

    def advance_turn(self) -> None:
        if not self.active_players():
            return
        while True:
            self.current_player_index = (self.current_player_index + 1) % len(self.players)
            if self.players[self.current_player_index].is_active:
                return

    def _ensure_current_active(self) -> None:
        current = self.current_player()
        if current is None or not current.is_active:
            self.advance_turn()

    def play_turn(self, connection_id: str, row: int, col: int) -> TurnResult:
        """Place for the caller, resolve, then update elimination, winner and turn."""
        if self.state != PLAYING:
            raise GameNotInProgress()
        player = self.player_by_connection(connection_id)
        if player is None or player.is_spectator:
            raise SpectatorForbidden()
        if self.current_player() is not player:
            raise NotPlayersTurn()

        self.place_token(row, col, player.id)
        result = TurnResult(events=self.resolve())
        result.eliminated = self.detect_eliminated()
        result.outcome = self.detect_winner()
        self.advance_turn()
        return result

    def handle_departure(self, connection_id: str):
        """Remove a leaving connection; returns ``(player, outcome)``."""
        was_playing = self.state == PLAYING
        player = self.remove_player(connection_id)
        outcome = None
        if player and was_playing and not player.is_spectator:
            outcome = self.detect_winner()
        return player, outcome

    # ---- projections ----

    def roster_dict(self):
        return {
            'players': [p.to_dict() for p in self.players],
            'current_player_index': self.current_player_index,
        }

    def to_dict(self):
        return {
            'id': self.id,
            'players': [p.to_dict() for p in self.players],
            'state': self.state,
            'current_player_index': self.current_player_index,
            'board': self.board.to_dict(),
            'winner': self.winner.to_dict() if self.winner else None,
            'created_at': self.created_at.isoformat(),
        }

    def summary(self):
        return {
            'id': self.id,
            'active_player_count': len(self.non_spectators()),
            'spectator_count': len(self.spectators()),
            'state': self.state,
        }
