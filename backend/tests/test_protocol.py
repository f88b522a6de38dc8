import dataclasses

import pytest

from foxgame.realtime.protocol import GAME_HANDLERS, make_action, parse_message


@pytest.mark.parametrize('raw', [
    '{oops',
    '[1, 2, 3]',
    '{"no_type": true}',
    '{"type": 5}',
    b'\xff\xfe',
    None,
    42,
])
def test_malformed_messages_parse_to_none(raw):
    assert parse_message(raw) is None


def test_text_bytes_and_objects_are_accepted():
    assert parse_message('{"type": "PING"}') == {'type': 'PING'}
    assert parse_message(b'{"type": "PING"}') == {'type': 'PING'}
    assert parse_message({'type': 'PING', 'x': 1}) == {'type': 'PING', 'x': 1}


def test_actions_are_immutable():
    action = make_action({'type': 'SUBMIT_HINT', 'hint': 'Roar'}, 'p1')
    assert action.get('hint') == 'Roar'
    assert action.get('missing', 'dflt') == 'dflt'
    with pytest.raises(TypeError):
        action.payload['hint'] = 'changed'
    with pytest.raises(dataclasses.FrozenInstanceError):
        action.player_id = 'p2'


def test_dispatch_table_covers_room_actions():
    assert set(GAME_HANDLERS) == {
        'SET_TIMER', 'START_GAME', 'READY_FOR_HINTS', 'HINT_TYPING', 'SUBMIT_HINT',
        'START_VOTING', 'SUBMIT_VOTE', 'ESCAPE_GUESS', 'PLAY_AGAIN',
    }
