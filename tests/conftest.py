from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import stocksales.models  # noqa: F401
from stocksales.db.database import Base, enable_sqlite_foreign_keys, get_db
from stocksales.main import app
from stocksales.models import Product
from stocksales.repositories import SqlInventoryRepository


@pytest.fixture
def engine():
    """In-memory SQLite shared across sessions, foreign keys enforced."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def repo(session):
    return SqlInventoryRepository(session)


@pytest.fixture
def widget(repo):
    """Widget bought at 5.00 with 10 units in stock."""
    product = Product(name="Widget", price=Decimal("5"), quantity=10)
    with repo.atomic():
        repo.add(product)
    repo.refresh(product)
    return product


@pytest.fixture
def client(session_factory):
    """Test client bound to the in-memory database (lifespan not run)."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def jan_10():
    return datetime(2024, 1, 10, 12, 0, 0)
