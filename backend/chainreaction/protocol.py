"""
Socket.IO message shapes for the chain reaction server.

Inbound payloads are parsed into one frozen dataclass per event before any
handler touches a room; anything unknown or malformed is rejected with
``MissingField``. Outbound event names form the closed ``Notice`` enum.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union

from .game.errors import MissingField

NAMESPACE = '/ws'
MAX_NAME_LEN = 20


class Notice(str, Enum):
    CONNECTED = 'connected'
    JOINED = 'joined'
    ROSTER_CHANGED = 'roster_changed'
    GAME_STARTED = 'game_started'
    GAME_UPDATED = 'game_updated'
    GAME_OVER = 'game_over'
    ACTION_REJECTED = 'action_rejected'
    CHAT_MESSAGE = 'chat_message'
    VOICE_SIGNAL = 'voice_signal'


@dataclass(frozen=True)
class JoinAction:
    room_id: str
    name: str
    is_spectator: bool = False


@dataclass(frozen=True)
class StartAction:
    room_id: str


@dataclass(frozen=True)
class PlaceAction:
    room_id: str
    row: int
    col: int


@dataclass(frozen=True)
class LeaveAction:
    room_id: str


@dataclass(frozen=True)
class ChatAction:
    room_id: str
    message: str


@dataclass(frozen=True)
class VoiceSignalAction:
    target: str
    signal: Any


Action = Union[JoinAction, StartAction, PlaceAction, LeaveAction, ChatAction, VoiceSignalAction]


def _require_str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise MissingField(f'{key} is required')
    return value.strip()


def _require_int(data: Dict[str, Any], key: str) -> int:
    value = data.get(key)
    # bool is an int subclass; reject it explicitly
    if not isinstance(value, int) or isinstance(value, bool):
        raise MissingField(f'{key} must be an integer')
    return value


def _parse_join(data):
    is_spectator = data.get('is_spectator', False)
    if not isinstance(is_spectator, bool):
        raise MissingField('is_spectator must be a boolean')
    return JoinAction(
        room_id=_require_str(data, 'room_id'),
        name=_require_str(data, 'name')[:MAX_NAME_LEN],
        is_spectator=is_spectator,
    )


def _parse_start(data):
    return StartAction(room_id=_require_str(data, 'room_id'))


def _parse_place(data):
    return PlaceAction(
        room_id=_require_str(data, 'room_id'),
        row=_require_int(data, 'row'),
        col=_require_int(data, 'col'),
    )


def _parse_leave(data):
    return LeaveAction(room_id=_require_str(data, 'room_id'))


def _parse_chat(data):
    return ChatAction(room_id=_require_str(data, 'room_id'), message=_require_str(data, 'message'))


def _parse_voice_signal(data):
    if 'signal' not in data:
        raise MissingField('signal is required')
    return VoiceSignalAction(target=_require_str(data, 'target'), signal=data['signal'])


_PARSERS = {
    'join_room': _parse_join,
    'start_game': _parse_start,
    'place_token': _parse_place,
    'leave_room': _parse_leave,
    'chat_message': _parse_chat,
    'voice_signal': _parse_voice_signal,
}

INBOUND_EVENTS = tuple(_PARSERS)


def parse_action(event: str, data: Any) -> Action:
    parser = _PARSERS.get(event)
    if parser is None:
        raise MissingField(f'Unknown event {event!r}')
    if not isinstance(data, dict):
        raise MissingField('Payload must be an object')
    return parser(data)
