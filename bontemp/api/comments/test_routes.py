# bontemp/api/comments/test_routes.py
"""
submitComment callable endpoint tests (Flask test client, mocked Firebase Auth)
"""

from unittest.mock import MagicMock, patch

import pytest
from flask import Flask

from bontemp.api.comments.routes import comments_bp
from bontemp.api.comments.services import CommentService
from bontemp.api.health.routes import health_bp
from bontemp.services.safety_service import SafetyVerdict

USER_CLAIMS = {'uid': 'u1', 'name': 'Giulia', 'firebase': {'sign_in_provider': 'google.com'}}
ANONYMOUS_CLAIMS = {'uid': 'anon', 'firebase': {'sign_in_provider': 'anonymous'}}


@pytest.fixture()
def store():
    store = MagicMock()
    store.add_comment.return_value = 'c1'
    return store


@pytest.fixture()
def safety():
    safety = MagicMock()
    safety.classify.return_value = SafetyVerdict(verdict='SAFE')
    return safety


@pytest.fixture()
def client(store, safety):
    app = Flask(__name__)
    app.services = {'comments': CommentService(store, safety)}
    app.register_blueprint(comments_bp)
    app.register_blueprint(health_bp)
    with app.test_client() as test_client:
        yield test_client


def _post(client, data, claims=None):
    headers = {}
    if claims is not None:
        headers['Authorization'] = 'Bearer token'
    with patch('bontemp.core.security.firebase_auth.verify_id_token', return_value=claims):
        return client.post('/submitComment', json={'data': data}, headers=headers)


def test_success(client, store):
    response = _post(client, {'postId': 'p1', 'text': 'Bellissima!'}, USER_CLAIMS)

    assert response.status_code == 200
    assert response.get_json() == {'result': {'success': True}}
    store.add_comment.assert_called_once()


def test_without_token(client, store):
    response = _post(client, {'postId': 'p1', 'text': 'Bellissima!'})

    assert response.status_code == 401
    assert response.get_json()['error']['status'] == 'UNAUTHENTICATED'
    store.add_comment.assert_not_called()


def test_anonymous_user(client):
    response = _post(client, {'postId': 'p1', 'text': 'Bellissima!'}, ANONYMOUS_CLAIMS)

    assert response.status_code == 403
    assert response.get_json()['error']['status'] == 'PERMISSION_DENIED'


def test_invalid_text(client):
    response = _post(client, {'postId': 'p1', 'text': 'x' * 501}, USER_CLAIMS)

    assert response.status_code == 400
    assert response.get_json()['error']['status'] == 'INVALID_ARGUMENT'


def test_body_without_data(client):
    with patch('bontemp.core.security.firebase_auth.verify_id_token', return_value=USER_CLAIMS):
        response = client.post('/submitComment', data='not json', headers={'Authorization': 'Bearer token'})
    assert response.status_code == 400


def test_unsafe_comment(client, safety, store):
    safety.classify.return_value = SafetyVerdict(verdict='UNSAFE')
    response = _post(client, {'postId': 'p1', 'text': 'testo offensivo'}, USER_CLAIMS)

    assert response.status_code == 400
    assert response.get_json()['error']['message'] == 'Il commento viola le linee guida della community.'
    store.add_comment.assert_not_called()


def test_classifier_outage(client, safety):
    safety.classify.side_effect = TimeoutError('upstream timeout after 30s')
    response = _post(client, {'postId': 'p1', 'text': 'Bellissima!'}, USER_CLAIMS)

    assert response.status_code == 500
    error = response.get_json()['error']
    assert error['status'] == 'INTERNAL'
    assert 'timeout' not in error['message']


def test_health(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.get_json() == {'status': 'ok'}
