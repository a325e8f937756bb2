import pytest
from fastapi.testclient import TestClient

from account_api.auth.passwords import hash_password
from account_api.core.config import Settings
from account_api.database import Base, init_schema, make_engine, make_session_factory
from account_api.main import create_app
from account_api.models.user import ROLE_ADMIN, ROLE_USER, User

ADMIN_EMAIL = 'admin@example.com'
PASSWORD = 'correct-horse-battery'


@pytest.fixture
def settings() -> Settings:
    return Settings(
        app_env='test',
        database_url='sqlite:///:memory:',
        jwt_secret='test-secret',
        jwt_expires_minutes=30,
        admin_emails=frozenset({ADMIN_EMAIL}),
        log_level='warning',
        log_dir=None,
    )


@pytest.fixture
def db(settings: Settings):
    engine = make_engine(settings.database_url)
    init_schema(engine)
    session = make_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def app(settings: Settings):
    application = create_app(settings)
    # fixtures may seed rows before the client runs the startup hook
    init_schema(application.state.engine)
    return application


@pytest.fixture
def client(app):
    # Secure cookies are only sent back over https.
    with TestClient(app, base_url='https://testserver') as test_client:
        yield test_client


@pytest.fixture
def app_db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


def make_user(db, *, email: str, role: str = ROLE_USER, name: str = 'Test User', password: str = PASSWORD) -> User:
    user = User(name=name, email=email, hashed_password=hash_password(password), role=role, token_version=0)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def regular_user(app_db) -> User:
    return make_user(app_db, email='user@example.com')


@pytest.fixture
def admin_user(app_db) -> User:
    return make_user(app_db, email=ADMIN_EMAIL, role=ROLE_ADMIN, name='Admin User')


def sign_in(client: TestClient, email: str, password: str = PASSWORD):
    return client.post('/api/auth/sign-in', json={'email': email, 'password': password})
