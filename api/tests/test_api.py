from vocadeck.services.csv_service import BOM, CSV_HEADERS

PREFIX = '/api/v1'
HEADER = ','.join(CSV_HEADERS)


def create_set(client, headers, title='Basics'):
    response = client.post(f'{PREFIX}/card-sets', json={'title': title}, headers=headers)
    assert response.status_code == 201
    return response.json()


def add_cards(client, headers, card_set_id, words):
    return [
        client.post(
            f'{PREFIX}/cards',
            json={'cardSetId': card_set_id, 'frontWord': word, 'backWord': word.upper()},
            headers=headers,
        ).json()
        for word in words
    ]


def test_health(client):
    assert client.get('/health').json() == {'status': 'healthy'}


def test_missing_user_header_is_unauthorized(client):
    response = client.get(f'{PREFIX}/card-sets')

    assert response.status_code == 401
    assert response.json()['type'] == 'AuthenticationError'


def test_blank_title_is_bad_request(client, headers):
    response = client.post(f'{PREFIX}/card-sets', json={'title': '  '}, headers=headers)

    assert response.status_code == 400


def test_card_set_crud(client, headers):
    card_set = create_set(client, headers)
    add_cards(client, headers, card_set['id'], ['a', 'b'])

    listed = client.get(f'{PREFIX}/card-sets', headers=headers).json()['card_sets']
    assert [(s['title'], s['card_count']) for s in listed] == [('Basics', 2)]

    detail = client.get(f"{PREFIX}/card-sets/{card_set['id']}", headers=headers).json()
    assert [c['front_word'] for c in detail['cards']] == ['a', 'b']

    response = client.put(f"{PREFIX}/card-sets/{card_set['id']}", json={'title': 'Renamed'}, headers=headers)
    assert response.json()['title'] == 'Renamed'

    response = client.delete(f"{PREFIX}/card-sets/{card_set['id']}", headers=headers)
    assert response.json()['cards_deleted'] == 2
    assert client.get(f"{PREFIX}/card-sets/{card_set['id']}", headers=headers).status_code == 404


def test_other_users_set_is_not_found(client, headers):
    card_set = create_set(client, headers)

    response = client.get(f"{PREFIX}/card-sets/{card_set['id']}", headers={'X-User-Id': 'user-2'})

    assert response.status_code == 404


def test_card_update_and_move(client, headers):
    card_set = create_set(client, headers)
    a, b, c = add_cards(client, headers, card_set['id'], ['a', 'b', 'c'])

    response = client.put(f"{PREFIX}/cards/{a['id']}", json={'frontHint': 'first'}, headers=headers)
    assert response.json()['front_hint'] == 'first'
    assert response.json()['back_word'] == 'A'

    client.post(f"{PREFIX}/cards/{c['id']}/move", json={'target_index': 0}, headers=headers)
    cards = client.get(f'{PREFIX}/cards', params={'card_set_id': card_set['id']}, headers=headers).json()['cards']
    assert [card['front_word'] for card in cards] == ['c', 'a', 'b']


def test_reorder_endpoint(client, headers):
    card_set = create_set(client, headers)
    a, b, c = add_cards(client, headers, card_set['id'], ['a', 'b', 'c'])

    response = client.put(
        f"{PREFIX}/card-sets/{card_set['id']}/order",
        json={'card_ids': [c['id'], a['id'], b['id']]},
        headers=headers,
    )

    assert response.status_code == 200
    order = response.json()['order']
    assert order[str(c['id'])] == 1000
    assert order[str(b['id'])] == 3000

    response = client.put(
        f"{PREFIX}/card-sets/{card_set['id']}/order",
        json={'card_ids': [c['id'], a['id']]},
        headers=headers,
    )
    assert response.status_code == 400


def test_csv_import_text_and_json(client, headers):
    card_set = create_set(client, headers)
    text = '\n'.join([HEADER, 'cat,,,猫,,', ',,,犬,,'])

    response = client.post(
        f"{PREFIX}/card-sets/{card_set['id']}/import",
        content=text.encode('utf-8'),
        headers={**headers, 'Content-Type': 'text/csv'},
    )
    assert response.status_code == 200
    body = response.json()
    assert body['imported'] == 1
    assert body['skipped_rows'][0]['line_number'] == 3

    response = client.post(
        f"{PREFIX}/card-sets/{card_set['id']}/import",
        json={'csv': HEADER + '\n"a, b",,,B,,'},
        headers=headers,
    )
    assert response.json()['imported'] == 1


def test_csv_import_without_rows_is_bad_request(client, headers):
    card_set = create_set(client, headers)

    response = client.post(
        f"{PREFIX}/card-sets/{card_set['id']}/import",
        json={'csv': HEADER},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()['type'] == 'EmptyInputError'


def test_csv_export_and_template(client, headers):
    card_set = create_set(client, headers)
    add_cards(client, headers, card_set['id'], ['a'])

    response = client.get(f"{PREFIX}/card-sets/{card_set['id']}/export", headers=headers)
    assert response.status_code == 200
    assert response.headers['content-type'].startswith('text/csv')
    assert 'filename=flashcards.csv' in response.headers['content-disposition']
    assert response.text.startswith(BOM)
    assert response.text.endswith('a,,,A,,')

    response = client.get(f'{PREFIX}/csv/template')
    assert 'filename=flashcard_template.csv' in response.headers['content-disposition']
    assert 'Hello' in response.text


def test_study_session_flow(client, headers):
    card_set = create_set(client, headers)
    cards = add_cards(client, headers, card_set['id'], ['a', 'b'])

    response = client.post(
        f'{PREFIX}/sessions',
        json={'cardSetId': card_set['id'], 'isRandomOrder': False, 'isReversed': True},
        headers=headers,
    )
    assert response.status_code == 201
    started = response.json()
    session_id = started['session']['id']
    assert [p['prompt']['word'] for p in started['cards']] == ['A', 'B']
    assert started['session']['current']['card_id'] == cards[0]['id']

    response = client.post(
        f'{PREFIX}/sessions/{session_id}/answers',
        json={'cardId': cards[0]['id'], 'isCorrect': True, 'responseTime': 1200},
        headers=headers,
    )
    assert response.json()['session']['status'] == 'in_progress'
    assert response.json()['stat']['score'] == 1

    response = client.post(
        f'{PREFIX}/sessions/{session_id}/answers',
        json={'card_id': cards[1]['id'], 'is_correct': False},
        headers=headers,
    )
    summary = response.json()['session']
    assert summary['status'] == 'completed'
    assert (summary['correct_words'], summary['accuracy']) == (1, 50)

    response = client.post(
        f'{PREFIX}/sessions/{session_id}/answers',
        json={'card_id': cards[1]['id'], 'is_correct': True},
        headers=headers,
    )
    assert response.status_code == 409

    assert client.post(f'{PREFIX}/sessions/{session_id}/cancel', headers=headers).status_code == 409

    stat = client.get(f"{PREFIX}/stats/cards/{cards[1]['id']}", headers=headers).json()
    assert (stat['total_attempts'], stat['incorrect_count']) == (1, 1)


def test_session_on_empty_set_is_bad_request(client, headers):
    card_set = create_set(client, headers)

    response = client.post(f'{PREFIX}/sessions', json={'card_set_id': card_set['id']}, headers=headers)

    assert response.status_code == 400


def test_cancelled_session(client, headers):
    card_set = create_set(client, headers)
    add_cards(client, headers, card_set['id'], ['a'])
    session_id = client.post(
        f'{PREFIX}/sessions', json={'card_set_id': card_set['id']}, headers=headers
    ).json()['session']['id']

    response = client.post(f'{PREFIX}/sessions/{session_id}/cancel', headers=headers)

    assert response.json()['status'] == 'cancelled'
    assert response.json()['current'] is None
    assert client.get(f'{PREFIX}/sessions/{session_id}', headers=headers).json()['status'] == 'cancelled'
