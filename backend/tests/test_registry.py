import random

import pytest

from foxgame.game.errors import RegistryFullError
from foxgame.game.registry import CODE_ALPHABET, RoomRegistry, clamp_max_players


class ScriptedRng:
    """Returns the scripted characters in order from choice()."""

    def __init__(self, chars):
        self._chars = iter(chars)

    def choice(self, seq):
        return next(self._chars)


def test_codes_use_unambiguous_alphabet(registry):
    for i in range(50):
        room = registry.create(f'p{i}', f'Host {i}')
        assert len(room.code) == 4
        assert all(ch in CODE_ALPHABET for ch in room.code)
    assert not set('O0I1') & set(CODE_ALPHABET)
    assert len(registry) == 50


def test_create_seeds_host_as_only_player(registry):
    room = registry.create('p_host', 'Alice', is_public=True, max_players=4)
    assert room.host_id == 'p_host'
    assert list(room.players) == ['p_host']
    assert room.scores == {'p_host': 0}
    assert room.name == "Alice's Room"
    assert room.phase == 'lobby'
    assert room.max_players == 4


def test_create_retries_on_collision():
    registry = RoomRegistry(rng=ScriptedRng('ABCD' 'ABCD' 'WXYZ'))
    first = registry.create('p1', 'A')
    second = registry.create('p2', 'B')
    assert first.code == 'ABCD'
    assert second.code == 'WXYZ'


def test_exhausted_code_space_raises():
    registry = RoomRegistry(rng=random.Random(0), alphabet='AB', code_length=1)
    registry.create('p1', 'A')
    registry.create('p2', 'B')
    with pytest.raises(RegistryFullError):
        registry.create('p3', 'C')


def test_bounded_attempts_raise():
    registry = RoomRegistry(rng=ScriptedRng('A' * 20), alphabet='AB', code_length=1, max_attempts=5)
    registry.create('p1', 'A')
    with pytest.raises(RegistryFullError):
        registry.create('p2', 'B')


def test_lookup_is_case_insensitive(registry):
    room = registry.create('p1', 'A')
    assert registry.get(room.code.lower()) is room
    assert room.code.lower() in registry
    assert registry.get('ZZZZ') is None
    assert registry.get(None) is None


def test_public_lobbies_only_lists_public_rooms_in_lobby(registry):
    public = registry.create('p1', 'A', is_public=True, room_name='Fun')
    registry.create('p2', 'B', is_public=False)
    busy = registry.create('p3', 'C', is_public=True)
    busy.phase = 'voting'

    lobbies = registry.list_public_lobbies()
    assert [l.code for l in lobbies] == [public.code]
    assert lobbies[0].to_dict() == {
        'roomCode': public.code,
        'roomName': 'Fun',
        'playerCount': 1,
        'maxPlayers': 6,
    }


def test_delete(registry):
    room = registry.create('p1', 'A')
    assert registry.delete(room.code) is True
    assert registry.delete(room.code) is False
    assert registry.get(room.code) is None


@pytest.mark.parametrize('raw,expected', [
    (None, 6), ('abc', 6), (2, 3), ('4', 4), (10, 6), (6, 6),
])
def test_clamp_max_players(raw, expected):
    assert clamp_max_players(raw) == expected
