from datetime import datetime, timezone

from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from chainreaction import socketio
from chainreaction.game import GameError, GameRoom, RoomRegistry
from chainreaction.game.errors import RoomFull, RoomNotFound
from chainreaction.protocol import NAMESPACE, Notice, parse_action


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _channel(room_id: str) -> str:
    return f"room:{room_id}"


def _winner_dict(outcome):
    if outcome is None or outcome.winner is None:
        return None
    return outcome.winner.to_dict()


class RoomEventHandlers:
    """Socket.IO handlers bound to one RoomRegistry.

    Every handler parses its payload first, then does all of its room work
    and broadcasting while holding ``registry.lock``. Engine rejections are
    reported to the calling connection only as ``action_rejected``.
    """

    def __init__(self, registry: RoomRegistry, max_active_players: int = 10):
        self.registry = registry
        self.max_active_players = max_active_players

    def _reject(self, exc: GameError) -> None:
        current_app.logger.info(f"[rejected] sid={_get_sid()} kind={exc.kind} message={exc}")
        emit(Notice.ACTION_REJECTED.value, exc.to_dict())

    def _require_room(self, room_id: str) -> GameRoom:
        room = self.registry.get(room_id)
        if room is None:
            raise RoomNotFound()
        return room

    def on_connect(self, auth=None):
        emit(Notice.CONNECTED.value, {'sid': _get_sid()})

    def on_disconnect(self, reason=None):
        sid = _get_sid()
        current_app.logger.info(f"[disconnect] sid={sid} reason={reason}")
        with self.registry.lock:
            # A connection may have joined several rooms; leave each of them
            room = self.registry.find_room_by_connection(sid)
            while room is not None:
                self._depart(room, sid)
                room = self.registry.find_room_by_connection(sid)
            self.registry.sweep_empty()

    def on_join_room(self, data):
        try:
            action = parse_action('join_room', data)
            sid = _get_sid()
            with self.registry.lock:
                room = self.registry.get_or_create(action.room_id)
                rejoining = room.player_by_connection(sid) is not None
                if (not rejoining and not action.is_spectator
                        and len(room.active_players()) >= self.max_active_players):
                    raise RoomFull()
                player = room.add_player(sid, action.name, action.is_spectator)
                join_room(_channel(room.id))

                snapshot = room.to_dict()
                snapshot['player'] = player.to_dict()
                emit(Notice.JOINED.value, snapshot)
                emit(Notice.ROSTER_CHANGED.value, room.roster_dict(), to=_channel(room.id))
            current_app.logger.info(f"[join] room={action.room_id} sid={sid} name={action.name}")
        except GameError as exc:
            self._reject(exc)

    def on_start_game(self, data):
        try:
            action = parse_action('start_game', data)
            with self.registry.lock:
                room = self._require_room(action.room_id)
                if room.player_by_connection(_get_sid()) is None:
                    raise RoomNotFound('You are not a member of this room')
                room.start_game()
                emit(Notice.GAME_STARTED.value, {
                    'state': room.state,
                    'board': room.board.to_dict(),
                    'current_player_index': room.current_player_index,
                    'players': [p.to_dict() for p in room.players],
                }, to=_channel(room.id))
            current_app.logger.info(f"[start] room={action.room_id}")
        except GameError as exc:
            self._reject(exc)

    def on_place_token(self, data):
        try:
            action = parse_action('place_token', data)
            with self.registry.lock:
                room = self._require_room(action.room_id)
                result = room.play_turn(_get_sid(), action.row, action.col)
                players = [p.to_dict() for p in room.players]
                emit(Notice.GAME_UPDATED.value, {
                    'board': room.board.to_dict(),
                    'current_player_index': room.current_player_index,
                    'players': players,
                    'explosions': [event.to_dict() for event in result.events],
                    'eliminated_players': [p.to_dict() for p in result.eliminated],
                    'winner': _winner_dict(result.outcome),
                }, to=_channel(room.id))
                if result.outcome is not None:
                    emit(Notice.GAME_OVER.value, {
                        'winner': _winner_dict(result.outcome),
                        'players': players,
                    }, to=_channel(room.id))
        except GameError as exc:
            self._reject(exc)

    def on_leave_room(self, data):
        try:
            action = parse_action('leave_room', data)
            sid = _get_sid()
            with self.registry.lock:
                room = self._require_room(action.room_id)
                leave_room(_channel(room.id))
                self._depart(room, sid)
                self.registry.sweep_empty()
        except GameError as exc:
            self._reject(exc)

    def _depart(self, room: GameRoom, sid: str) -> None:
        player, outcome = room.handle_departure(sid)
        if player is None:
            return
        emit(Notice.ROSTER_CHANGED.value, room.roster_dict(), to=_channel(room.id))
        if outcome is not None:
            emit(Notice.GAME_OVER.value, {
                'winner': _winner_dict(outcome),
                'players': [p.to_dict() for p in room.players],
            }, to=_channel(room.id))

    def on_chat_message(self, data):
        try:
            action = parse_action('chat_message', data)
            with self.registry.lock:
                room = self._require_room(action.room_id)
                player = room.player_by_connection(_get_sid())
                if player is None:
                    raise RoomNotFound('Player not found in room')
                emit(Notice.CHAT_MESSAGE.value, {
                    'name': player.name,
                    'message': action.message,
                    'timestamp': datetime.now(timezone.utc).isoformat(),
                }, to=_channel(room.id))
        except GameError as exc:
            self._reject(exc)

    def on_voice_signal(self, data):
        try:
            action = parse_action('voice_signal', data)
            emit(Notice.VOICE_SIGNAL.value, {
                'signal': action.signal,
                'from': _get_sid(),
            }, to=action.target)
        except GameError as exc:
            self._reject(exc)


def register_socketio_handlers(registry: RoomRegistry, max_active_players: int = 10) -> RoomEventHandlers:
    """Register Socket.IO event handlers for ``registry`` on namespace '/ws'."""
    handlers = RoomEventHandlers(registry, max_active_players)
    socketio.on_event('connect', handlers.on_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handlers.on_disconnect, namespace=NAMESPACE)
    socketio.on_event('join_room', handlers.on_join_room, namespace=NAMESPACE)
    socketio.on_event('start_game', handlers.on_start_game, namespace=NAMESPACE)
    socketio.on_event('place_token', handlers.on_place_token, namespace=NAMESPACE)
    socketio.on_event('leave_room', handlers.on_leave_room, namespace=NAMESPACE)
    socketio.on_event('chat_message', handlers.on_chat_message, namespace=NAMESPACE)
    socketio.on_event('voice_signal', handlers.on_voice_signal, namespace=NAMESPACE)
    return handlers
