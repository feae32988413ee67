# tests/test_cos_routes.py
import io


def test_routes_require_token(client):
    assert client.get('/cos?key=a.txt').status_code == 401
    assert client.post('/cos/preview', json={'key': 'a.txt'}).status_code == 401
    assert client.post('/cos/folders', json={'name': 'docs'}).status_code == 401


def test_get_streams_object(client, auth_headers, cos_client):
    payload = b'0123456789' * 10000
    cos_client.objects['uploads/pdf/1-a.pdf'] = (payload, 'application/pdf')

    resp = client.get('/cos?key=uploads/pdf/1-a.pdf', headers=auth_headers)

    assert resp.status_code == 200
    assert resp.mimetype == 'application/pdf'
    assert resp.data == payload


def test_get_closes_object_stream(client, auth_headers, cos_client):
    cos_client.objects['notes.txt'] = (b'hello', 'text/plain')

    resp = client.get('/cos?key=notes.txt', headers=auth_headers)

    assert resp.data == b'hello'
    assert cos_client.last_body.closed


def test_get_missing_object(client, auth_headers):
    resp = client.get('/cos?key=missing.txt', headers=auth_headers)

    assert resp.status_code == 404
    assert resp.get_json()['code'] == 'NoSuchKey'


def test_get_requires_key(client, auth_headers):
    assert client.get('/cos', headers=auth_headers).status_code == 400


def test_uploaded_file_can_be_fetched(client, auth_headers):
    resp = client.post(
        '/cos',
        data={'file': (io.BytesIO(b'hello world'), 'notes.txt', 'text/plain')},
        content_type='multipart/form-data',
        headers=auth_headers,
    )
    key = resp.get_json()['key']

    resp = client.get('/cos', query_string={'key': key}, headers=auth_headers)

    assert resp.data == b'hello world'


def test_preview_returns_signed_url(app, client, auth_headers, cos_client):
    resp = client.post('/cos/preview', json={'key': 'uploads/image/1-cat.png'}, headers=auth_headers)

    assert resp.status_code == 200
    url = resp.get_json()['url']
    assert 'uploads/image/1-cat.png' in url
    assert str(app.config['COS_SIGNED_URL_EXPIRES']) in url


def test_preview_requires_key(client, auth_headers):
    assert client.post('/cos/preview', json={}, headers=auth_headers).status_code == 400


def test_get_unknown_record(client, auth_headers):
    resp = client.get('/cos/files/42', headers=auth_headers)

    assert resp.status_code == 404
    assert 'error' in resp.get_json()
