"""Chain reaction game engine.

Pure in-memory domain logic (board, players, rooms and the room registry)
imported by the Socket.IO handlers and HTTP routes, keeping transport
concerns separated from core game mechanics.
"""

from .board import Board, Cell, ExplosionEvent
from .errors import GameError
from .player import Player
from .registry import RoomRegistry
from .room import FINISHED, LOBBY, PLAYING, GameOver, GameRoom, TurnResult

__all__ = [
    "Board",
    "Cell",
    "ExplosionEvent",
    "GameError",
    "GameOver",
    "GameRoom",
    "Player",
    "RoomRegistry",
    "TurnResult",
    "LOBBY",
    "PLAYING",
    "FINISHED",
]
