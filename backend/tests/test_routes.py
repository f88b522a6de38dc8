import json


def test_health(client):
    res = client.get('/api/health')
    assert res.status_code == 200
    assert res.get_json() == {'ok': True, 'rooms': 0}


def test_topics(client):
    data = client.get('/api/topics').get_json()
    assert len(data['topics']) == 9
    assert data['topics'][0]['key'] == 'animals'


def test_room_lookup_and_public_list(flask_app, client):
    coordinator = flask_app.extensions['foxgame']
    coordinator.handle_message('sid-1', json.dumps({
        'type': 'CREATE_ROOM', 'playerName': 'Alice', 'isPublic': True,
    }))
    room = coordinator.registry.list_rooms()[0]

    rooms = client.get('/api/rooms').get_json()['rooms']
    assert [r['roomCode'] for r in rooms] == [room.code]

    summary = client.get(f'/api/rooms/{room.code.lower()}').get_json()
    assert summary['roomCode'] == room.code
    assert summary['phase'] == 'lobby'
    assert summary['playerCount'] == 1

    res = client.get('/api/rooms/ZZZZ')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'room_not_found'}
