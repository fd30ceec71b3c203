class GameError(Exception):
    """Base class for every action the engine refuses.

    Each subclass carries a stable ``kind`` string which is what clients see in
    ``action_rejected`` payloads. None of these are fatal: the room is left as
    it was before the action.
    """

    kind = 'GameError'
    default_message = 'Action rejected'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)

    def to_dict(self):
        return {'kind': self.kind, 'message': str(self)}


class OutOfBounds(GameError):
    kind = 'OutOfBounds'
    default_message = 'Invalid position'


class CellOwnershipConflict(GameError):
    kind = 'CellOwnershipConflict'
    default_message = 'Cell owned by another player'


class CellAtCapacity(GameError):
    kind = 'CellAtCapacity'
    default_message = 'Cell is at capacity and waiting to explode'


class NotExplodable(GameError):
    kind = 'NotExplodable'
    default_message = 'Cell cannot explode'


class GameNotInProgress(GameError):
    kind = 'GameNotInProgress'
    default_message = 'Game not in progress'


class AlreadyStarted(GameError):
    kind = 'AlreadyStarted'
    default_message = 'Game already started'


class InsufficientPlayers(GameError):
    kind = 'InsufficientPlayers'
    default_message = 'Need at least 2 players to start'


class RoomNotFound(GameError):
    kind = 'RoomNotFound'
    default_message = 'Room not found'


class NotPlayersTurn(GameError):
    kind = 'NotPlayersTurn'
    default_message = 'Not your turn'


class SpectatorForbidden(GameError):
    kind = 'SpectatorForbidden'
    default_message = 'Spectators cannot place tokens'


class RoomFull(GameError):
    kind = 'RoomFull'
    default_message = 'Room is full'


class MissingField(GameError):
    kind = 'MissingField'
    default_message = 'Room ID and name are required'
