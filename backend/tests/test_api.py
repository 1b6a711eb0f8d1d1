def _create(client, difficulty='easy', name='Alice'):
    res = client.post('/api/game/create', json={'difficulty': difficulty, 'playerName': name})
    assert res.status_code == 200
    return res.get_json()


def test_index_and_health(client):
    assert client.get('/').status_code == 200
    res = client.get('/health')
    assert res.status_code == 200
    data = res.get_json()
    assert data['status'] == 'OK'
    assert data['activeGames'] == 0
    assert data['activePlayers'] == 0


def test_create_game(client):
    data = _create(client)
    assert len(data['gameId']) == 8
    assert data['playerId']
    health = client.get('/health').get_json()
    assert health['activeGames'] == 1
    assert health['activePlayers'] == 1


def test_create_game_invalid_difficulty(client):
    for body in ({'difficulty': 'lett', 'playerName': 'A'}, {'playerName': 'A'}, None):
        res = client.post('/api/game/create', json=body)
        assert res.status_code == 400
        assert res.get_json()['error'] == 'Invalid difficulty level'


def test_join_and_state(client):
    created = _create(client, 'medium')
    res = client.post(f"/api/game/join/{created['gameId']}", json={'playerName': 'Bob'})
    assert res.status_code == 200
    joined = res.get_json()
    assert joined['gameId'] == created['gameId']
    assert joined['playerId'] != created['playerId']

    res = client.get(f"/api/game/{created['gameId']}")
    assert res.status_code == 200
    game = res.get_json()
    assert game['phase'] == 'lobby'
    assert game['difficulty'] == 'medium'
    assert [p['name'] for p in game['players']] == ['Alice', 'Bob']
    assert [p['isHost'] for p in game['players']] == [True, False]
    assert 'board' not in game and 'originalBoard' not in game


def test_join_errors_are_400(client):
    res = client.post('/api/game/join/NOPE1234', json={'playerName': 'Bob'})
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Game not found'

    game_id = _create(client)['gameId']
    assert client.post(f'/api/game/join/{game_id}', json={'playerName': 'Bob'}).status_code == 200
    res = client.post(f'/api/game/join/{game_id}', json={'playerName': 'Cara'})
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Game is full'


def test_default_and_trimmed_names(client):
    created = client.post('/api/game/create', json={'difficulty': 'hard'}).get_json()
    game_id = created['gameId']
    client.post(f'/api/game/join/{game_id}', json={'playerName': '  ' + 'x' * 50 + '  '})
    players = client.get(f'/api/game/{game_id}').get_json()['players']
    assert players[0]['name'] == 'Player 1'
    assert players[1]['name'] == 'x' * 32


def test_get_unknown_game(client):
    res = client.get('/api/game/UNKNOWN1')
    assert res.status_code == 404
    assert res.get_json()['error'] == 'Game not found'


def test_non_object_json_body(client):
    res = client.post('/api/game/create', json=[1])
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Invalid difficulty level'

    game_id = _create(client)['gameId']
    res = client.post(f'/api/game/join/{game_id}', json='Bob')
    assert res.status_code == 200
    players = client.get(f'/api/game/{game_id}').get_json()['players']
    assert players[1]['name'] == 'Player 2'


def test_lowercase_game_id(client):
    game_id = _create(client)['gameId']
    assert client.get(f'/api/game/{game_id.lower()}').get_json()['id'] == game_id
    res = client.post(f'/api/game/join/{game_id.lower()}', json={'playerName': 'Bob'})
    assert res.get_json()['gameId'] == game_id
