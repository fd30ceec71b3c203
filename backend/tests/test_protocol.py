"""Tests for inbound payload parsing."""

import pytest

from chainreaction.game.errors import MissingField
from chainreaction.protocol import (
    INBOUND_EVENTS,
    MAX_NAME_LEN,
    ChatAction,
    JoinAction,
    LeaveAction,
    PlaceAction,
    StartAction,
    VoiceSignalAction,
    parse_action,
)


def test_parse_join_defaults_to_player():
    action = parse_action('join_room', {'room_id': ' ABC ', 'name': 'Alice'})
    assert action == JoinAction(room_id='ABC', name='Alice', is_spectator=False)


def test_parse_join_spectator_and_long_name():
    action = parse_action('join_room', {'room_id': 'ABC', 'name': 'x' * 40, 'is_spectator': True})
    assert action.is_spectator is True
    assert len(action.name) == MAX_NAME_LEN


@pytest.mark.parametrize('payload', [
    {'name': 'Alice'},
    {'room_id': 'ABC'},
    {'room_id': '', 'name': 'Alice'},
    {'room_id': 'ABC', 'name': '   '},
    {'room_id': 42, 'name': 'Alice'},
    {'room_id': 'ABC', 'name': 'Alice', 'is_spectator': 'yes'},
])
def test_parse_join_rejects_missing_or_malformed_fields(payload):
    with pytest.raises(MissingField) as excinfo:
        parse_action('join_room', payload)
    assert excinfo.value.kind == 'MissingField'


def test_parse_place_requires_integer_coordinates():
    assert parse_action('place_token', {'room_id': 'R', 'row': 1, 'col': 2}) == PlaceAction('R', 1, 2)
    for bad in ({'room_id': 'R', 'row': '1', 'col': 2},
                {'room_id': 'R', 'row': True, 'col': 2},
                {'room_id': 'R', 'row': 1},
                {'row': 1, 'col': 2}):
        with pytest.raises(MissingField):
            parse_action('place_token', bad)


def test_parse_other_actions():
    assert parse_action('start_game', {'room_id': 'R'}) == StartAction('R')
    assert parse_action('leave_room', {'room_id': 'R'}) == LeaveAction('R')
    assert parse_action('chat_message', {'room_id': 'R', 'message': 'hi'}) == ChatAction('R', 'hi')
    signal = {'sdp': 'offer'}
    assert parse_action('voice_signal', {'target': 'sid-2', 'signal': signal}) == VoiceSignalAction('sid-2', signal)
    with pytest.raises(MissingField):
        parse_action('voice_signal', {'target': 'sid-2'})


def test_unknown_event_and_non_object_payloads_are_rejected():
    with pytest.raises(MissingField):
        parse_action('explode_everything', {'room_id': 'R'})
    for event in INBOUND_EVENTS:
        with pytest.raises(MissingField):
            parse_action(event, None)
        with pytest.raises(MissingField):
            parse_action(event, ['room_id'])
