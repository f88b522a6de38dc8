import json

from foxgame.game.events import error, to_origin, to_player, to_room
from foxgame.game.models import Player, Room
from foxgame.realtime.dispatcher import Dispatcher


def make_room():
    room = Room(code='ABCD', name='Test', host_id='p1')
    room.players['p1'] = Player(id='p1', name='A', sid='s1')
    room.players['p2'] = Player(id='p2', name='B', sid='s2')
    room.players['p3'] = Player(id='p3', name='C', connected=False, sid=None)
    return room


class Wire:
    def __init__(self):
        self.frames = []

    def __call__(self, sid, text):
        self.frames.append((sid, text))


def test_broadcast_skips_excluded_and_offline_players():
    wire = Wire()
    Dispatcher(wire).broadcast(make_room(), {'type': 'PING_ALL'}, exclude_id='p2')
    assert [sid for sid, _ in wire.frames] == ['s1']
    assert json.loads(wire.frames[0][1]) == {'type': 'PING_ALL'}


def test_broadcast_serializes_once():
    wire = Wire()
    Dispatcher(wire).broadcast(make_room(), {'type': 'X', 'n': 1})
    texts = [text for _, text in wire.frames]
    assert len(texts) == 2
    assert texts[0] is texts[1]


def test_send_to_offline_or_unknown_player_is_a_noop():
    wire = Wire()
    dispatcher = Dispatcher(wire)
    room = make_room()
    dispatcher.send_to(room, 'p3', {'type': 'X'})
    dispatcher.send_to(room, 'p9', {'type': 'X'})
    dispatcher.send_to(room, None, {'type': 'X'})
    assert wire.frames == []


def test_deliver_keeps_order_and_routes_origin():
    wire = Wire()
    room = make_room()
    Dispatcher(wire).deliver(
        room,
        [
            to_player('p2', 'FIRST'),
            to_room('SECOND', exclude_id='p2'),
            to_origin('THIRD'),
            error('nope'),
        ],
        origin_sid='s9',
    )
    assert [(sid, json.loads(text)['type']) for sid, text in wire.frames] == [
        ('s2', 'FIRST'),
        ('s1', 'SECOND'),
        ('s9', 'THIRD'),
        ('s9', 'ERROR'),
    ]


def test_transport_failure_does_not_stop_fan_out():
    sent = []

    def flaky(sid, text):
        if sid == 's1':
            raise ConnectionError('gone')
        sent.append(sid)

    Dispatcher(flaky).broadcast(make_room(), {'type': 'X'})
    assert sent == ['s2']
