import logging
import random
import string
import threading
from typing import Dict, List, Optional

from .room import FINISHED, PLAYING, GameRoom

log = logging.getLogger(__name__)

ROOM_ID_ALPHABET = string.ascii_uppercase + string.digits
ROOM_ID_LENGTH = 6


class RoomRegistry:
    """Owns every live GameRoom, keyed by room id.

    One instance is built per app in ``create_app`` and handed to the socket
    handlers and the HTTP blueprint; there is no module-level registry.
    ``lock`` must be held by anything that reads or mutates rooms so event
    handlers and the periodic sweep never interleave mid-mutation.
    """

    def __init__(self, rows: int = 6, cols: int = 10, **room_options):
        self.rows = rows
        self.cols = cols
        self.room_options = room_options
        self.rooms: Dict[str, GameRoom] = {}
        self.lock = threading.RLock()
        self._sweeper = None

    def get_or_create(self, room_id: str, rows: Optional[int] = None, cols: Optional[int] = None) -> GameRoom:
        room = self.rooms.get(room_id)
        if room is not None:
            return room
        room = GameRoom(
            room_id,
            rows=rows or self.rows,
            cols=cols or self.cols,
            **self.room_options,
        )
        self.rooms[room_id] = room
        log.info(f"[room-create] room={room_id} board={room.board.rows}x{room.board.cols}")
        return room

    def get(self, room_id: str) -> Optional[GameRoom]:
        return self.rooms.get(room_id)

    def remove(self, room_id: str) -> bool:
        removed = self.rooms.pop(room_id, None) is not None
        if removed:
            log.info(f"[room-remove] room={room_id}")
        return removed

    def all(self) -> List[GameRoom]:
        return list(self.rooms.values())

    def sweep_empty(self) -> List[str]:
        empty = [room_id for room_id, room in self.rooms.items() if not room.players]
        for room_id in empty:
            self.remove(room_id)
        if empty:
            log.info(f"[sweep] removed {len(empty)} empty rooms")
        return empty

    def find_room_by_connection(self, connection_id: str) -> Optional[GameRoom]:
        for room in self.rooms.values():
            if room.player_by_connection(connection_id):
                return room
        return None

    def stats(self):
        stats = {
            'total_rooms': len(self.rooms),
            'total_players': 0,
            'total_spectators': 0,
            'games_in_progress': 0,
            'games_finished': 0,
        }
        for room in self.rooms.values():
            stats['total_players'] += len(room.non_spectators())
            stats['total_spectators'] += len(room.spectators())
            if room.state == PLAYING:
                stats['games_in_progress'] += 1
            elif room.state == FINISHED:
                stats['games_finished'] += 1
        return stats

    def generate_room_id(self) -> str:
        """Short unused id such as ``K3ZQ7A``."""
        while True:
            room_id = ''.join(random.choices(ROOM_ID_ALPHABET, k=ROOM_ID_LENGTH))
            if room_id not in self.rooms:
                return room_id

    def attach_sweeper(self, sweeper) -> None:
        self._sweeper = sweeper

    def close(self) -> None:
        if self._sweeper is not None:
            self._sweeper.stop()
            self._sweeper = None
        with self.lock:
            self.rooms.clear()
