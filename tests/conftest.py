import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app
from models import ChallengeDefinition, User
from auth import ActionContext, create_access_token, hash_password

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _make_user(db, email, name):
    user = User(email=email, password_hash=hash_password("secret123"), name=name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def alice(db_session):
    return _make_user(db_session, "alice@dailychallenge.app", "Alice")


@pytest.fixture
def bob(db_session):
    return _make_user(db_session, "bob@dailychallenge.app", "Bob")


def headers_for(user):
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}


@pytest.fixture
def alice_headers(alice):
    return headers_for(alice)


@pytest.fixture
def bob_headers(bob):
    return headers_for(bob)


@pytest.fixture
def system_definition(db_session):
    definition = ChallengeDefinition(
        user_id=None,
        title="Meditar 10 minutos",
        category="mindfulness",
        is_system=True,
        is_active=True,
    )
    db_session.add(definition)
    db_session.commit()
    db_session.refresh(definition)
    return definition


@pytest.fixture
def context_for(db_session):
    def _context(user=None):
        return ActionContext(db=db_session, user=user)
    return _context
