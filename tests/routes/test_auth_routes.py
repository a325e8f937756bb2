from account_api.auth.jwt_handler import decode_access_token
from account_api.models.user import User

from conftest import ADMIN_EMAIL, PASSWORD, sign_in


def _cookie_header(response) -> str:
    return response.headers.get('set-cookie', '')


def test_sign_up_creates_user_without_leaking_password(client, app_db) -> None:
    response = client.post(
        '/api/auth/sign-up',
        json={'name': 'Ada Lovelace', 'email': 'ADA@example.com', 'password': PASSWORD},
    )

    assert response.status_code == 201
    body = response.json()
    assert body['message'] == 'User registered'
    assert body['user']['email'] == 'ada@example.com'
    assert body['user']['role'] == 'user'
    assert 'password' not in response.text
    assert 'hashed_password' not in response.text
    assert 'set-cookie' not in response.headers

    users = app_db.query(User).all()
    assert len(users) == 1
    assert users[0].hashed_password != PASSWORD


def test_sign_up_with_configured_admin_email_gets_admin_role(client) -> None:
    response = client.post('/api/auth/sign-up', json={'name': 'Admin', 'email': ADMIN_EMAIL, 'password': PASSWORD})

    assert response.status_code == 201
    assert response.json()['user']['role'] == 'admin'


def test_sign_up_ignores_requested_role(client) -> None:
    response = client.post(
        '/api/auth/sign-up',
        json={'name': 'Mallory', 'email': 'mallory@example.com', 'password': PASSWORD, 'role': 'admin'},
    )

    assert response.status_code == 201
    assert response.json()['user']['role'] == 'user'


def test_sign_up_with_invalid_body_returns_field_errors(client, app_db) -> None:
    response = client.post('/api/auth/sign-up', json={'name': 'Ada', 'email': 'nope', 'password': 'short'})

    assert response.status_code == 400
    error = response.json()['error']
    assert error['code'] == 'VALIDATION_ERROR'
    email_errors = [detail for detail in error['details'] if detail['field'] == 'email']
    assert len(email_errors) == 1
    assert email_errors[0]['message'].startswith('value is not a valid email address')
    assert {'field': 'password', 'message': 'Password must be at least 8 characters.'} in error['details']
    assert app_db.query(User).count() == 0


def test_sign_up_with_missing_field_creates_nothing(client, app_db) -> None:
    response = client.post('/api/auth/sign-up', json={'email': 'ada@example.com', 'password': PASSWORD})

    assert response.status_code == 400
    assert [detail['field'] for detail in response.json()['error']['details']] == ['name']
    assert app_db.query(User).count() == 0


def test_sign_up_with_duplicate_email_conflicts(client, regular_user, app_db) -> None:
    response = client.post(
        '/api/auth/sign-up',
        json={'name': 'Copy Cat', 'email': regular_user.email, 'password': PASSWORD},
    )

    assert response.status_code == 409
    assert response.json()['error']['code'] == 'CONFLICT'
    assert app_db.query(User).count() == 1


def test_sign_in_sets_hardened_cookie_carrying_identity(client, regular_user, settings) -> None:
    response = sign_in(client, regular_user.email)

    assert response.status_code == 200
    assert response.json()['user']['id'] == regular_user.id
    assert 'token' not in response.json()

    header = _cookie_header(response).lower()
    assert header.startswith('token=')
    assert 'httponly' in header
    assert 'secure' in header
    assert 'samesite=strict' in header
    assert 'path=/' in header
    assert f'max-age={settings.cookie_max_age}' in header

    claims = decode_access_token(client.cookies['token'], settings)
    assert claims.user_id == regular_user.id
    assert claims.role == regular_user.role


def test_failed_sign_in_sets_no_cookie_and_does_not_reveal_accounts(client, regular_user) -> None:
    wrong_password = sign_in(client, regular_user.email, 'wrong-password')
    unknown_email = sign_in(client, 'ghost@example.com', 'wrong-password')

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {
        'error': {'code': 'AUTHENTICATION_REQUIRED', 'message': 'Invalid email or password'},
    }
    assert 'set-cookie' not in wrong_password.headers
    assert 'set-cookie' not in unknown_email.headers


def test_me_requires_session(client) -> None:
    response = client.get('/api/auth/me')

    assert response.status_code == 401
    assert response.json()['error']['code'] == 'AUTHENTICATION_REQUIRED'


def test_me_returns_current_user(client, regular_user) -> None:
    sign_in(client, regular_user.email)

    response = client.get('/api/auth/me')

    assert response.status_code == 200
    assert response.json()['email'] == regular_user.email


def test_me_rejects_tampered_cookie(client, regular_user) -> None:
    sign_in(client, regular_user.email)
    token = client.cookies['token']
    tampered = token[:-2] + ('AA' if not token.endswith('AA') else 'BB')

    response = client.get('/api/auth/me', headers={'Cookie': f'token={tampered}'})

    assert response.status_code == 401


def test_sign_out_clears_cookie_and_revokes_token(client, regular_user) -> None:
    sign_in(client, regular_user.email)
    stolen_token = client.cookies['token']

    response = client.post('/api/auth/sign-out')

    assert response.status_code == 200
    assert response.json() == {'message': 'User signed out'}
    assert 'max-age=0' in _cookie_header(response).lower()

    assert 'token' not in client.cookies
    replayed = client.get('/api/auth/me', headers={'Cookie': f'token={stolen_token}'})
    assert replayed.status_code == 401
    assert replayed.json()['error']['message'] == 'Session has been revoked'


def test_sign_out_without_session_still_succeeds(client) -> None:
    response = client.post('/api/auth/sign-out')

    assert response.status_code == 200
