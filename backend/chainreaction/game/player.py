import uuid
from typing import Optional


class Player:
    """A member of one room. The id is stable; the connection id is the Socket.IO sid."""

    def __init__(self, connection_id: str, name: str, is_spectator: bool = False):
        self.id = uuid.uuid4().hex
        self.connection_id = connection_id
        self.name = name
        self.is_spectator = is_spectator
        self.color: Optional[str] = None
        self.is_eliminated = False
        self.is_ready = False

    @property
    def is_active(self) -> bool:
        return not self.is_spectator and not self.is_eliminated

    def reset(self) -> None:
        self.is_eliminated = False
        self.is_ready = False

    def to_dict(self):
        return {
            'id': self.id,
            'connection_id': self.connection_id,
            'name': self.name,
            'is_spectator': self.is_spectator,
            'color': self.color,
            'is_eliminated': self.is_eliminated,
            'is_ready': self.is_ready,
        }

    def __repr__(self):
        return f'<Player {self.name} {self.id[:8]}>'
