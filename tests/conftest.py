"""
Shared fixtures: in-memory SQLite database, API client and user factories.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gigzz.main import app
from gigzz.core.auth_dependency import get_db
from gigzz.core.rate_limit import rate_limit_store
from gigzz.core.security import hash_password, create_access_token
from gigzz.db.base import Base
from gigzz.db.models.profile import Applicant, Employer
from gigzz.db.models.user import User, ROLE_APPLICANT, ROLE_EMPLOYER
from gigzz.services import wallet_service


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override get_db dependency for testing."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="function", autouse=True)
def setup_db():
    """Create and drop tables for each test."""
    Base.metadata.create_all(bind=test_engine)
    rate_limit_store.clear()
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Provide a database session for tests."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture(autouse=True)
def media_root(tmp_path, monkeypatch):
    """Keep uploads out of the working tree."""
    from gigzz.core import config
    monkeypatch.setattr(config, "MEDIA_ROOT", str(tmp_path / "media"))
    return tmp_path / "media"


def _make_user(db, email, role, name, balance=0, is_admin=False):
    user = User(
        email=email,
        password_hash=hash_password("testpass123"),
        role=role,
        email_verified=True,
        is_admin=is_admin,
    )
    db.add(user)
    db.flush()
    if role == ROLE_EMPLOYER:
        db.add(Employer(id=user.id, name=name, country="Nigeria", state="Lagos", city="Ikeja"))
    else:
        db.add(Applicant(id=user.id, full_name=name, country="Nigeria", state="Lagos", city="Ikeja"))
    wallet_service.get_or_create_wallet(db, user.id)
    db.commit()
    if balance:
        wallet_service.credit(db, user.id, balance, "Test funding", reference=f"seed-{user.id}")
    db.refresh(user)
    return user


@pytest.fixture
def make_employer(db_session):
    def factory(email="client@example.com", name="Acme Studio", balance=0, is_admin=False):
        return _make_user(db_session, email, ROLE_EMPLOYER, name, balance, is_admin)
    return factory


@pytest.fixture
def make_applicant(db_session):
    def factory(email="creative@example.com", name="Ada Obi", balance=0):
        return _make_user(db_session, email, ROLE_APPLICANT, name, balance)
    return factory


@pytest.fixture
def employer(make_employer):
    return make_employer()


@pytest.fixture
def applicant(make_applicant):
    return make_applicant()


def auth_headers(user):
    """Bearer header for a user."""
    return {"Authorization": f"Bearer {create_access_token({'sub': user.email})}"}


@pytest.fixture(name="auth_headers")
def auth_headers_fixture():
    return auth_headers
