from flask import Blueprint, jsonify

from chainreaction import get_registry

rooms = Blueprint('rooms', __name__)


@rooms.route('/rooms', methods=['GET'])
def list_rooms():
    """Read-only listing used by the lobby page."""
    registry = get_registry()
    with registry.lock:
        return jsonify([room.summary() for room in registry.all()])


@rooms.route('/rooms', methods=['POST'])
def new_room_id():
    """
    Hands out a fresh, unused room id. The room itself is created by the
    first ``join_room`` that uses it.
    """
    registry = get_registry()
    with registry.lock:
        room_id = registry.generate_room_id()
    return jsonify({'room_id': room_id}), 201


@rooms.route('/rooms/<string:room_id>', methods=['GET'])
def get_room(room_id):
    registry = get_registry()
    with registry.lock:
        room = registry.get(room_id)
        if room is None:
            return jsonify({'error': 'Room not found', 'kind': 'RoomNotFound'}), 404
        return jsonify({
            'id': room.id,
            'players': [p.to_dict() for p in room.players],
            'state': room.state,
            'current_player_index': room.current_player_index,
        })


@rooms.route('/stats', methods=['GET'])
def get_stats():
    registry = get_registry()
    with registry.lock:
        return jsonify(registry.stats())
