"""Shared test fixtures."""
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from catalog_api.core.deps import get_db
from catalog_api.core.security import create_access_token
from catalog_api.main import app
from catalog_api.models import Base, Category
from catalog_api.schemas.actor import Actor
from catalog_api.schemas.category import CategoryCreate
from catalog_api.services import category_service

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    """In-memory database with fresh tables for every test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def actor() -> Actor:
    return Actor(id="admin-1", email="admin@example.com", role="admin")


@pytest.fixture
def create(db, actor):
    """Create a category through the lifecycle service."""

    def _create(name: str, parent: Category | None = None, **fields) -> Category:
        category_in = CategoryCreate(
            name=name,
            parent_id=str(parent.id) if parent is not None else None,
            **fields,
        )
        return category_service.create_category(db, category_in, actor)

    return _create


@pytest.fixture
def chain(create):
    """Three-level chain A -> B -> C."""
    a = create("A")
    b = create("B", parent=a)
    c = create("C", parent=b)
    return a, b, c


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict:
    token = create_access_token({"sub": "admin-1", "email": "admin@example.com", "role": "admin"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers() -> dict:
    token = create_access_token({"sub": "user-1", "email": "user@example.com", "role": "customer"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def assert_tree_consistent(db):
    """Check the materialized path invariants over every stored node."""

    def _check() -> None:
        db.expire_all()
        nodes = {node.id: node for node in db.query(Category).all()}
        for node in nodes.values():
            assert node.depth == len(node.ancestors)
            assert node.id not in node.ancestors
            if node.parent_id is None:
                assert node.ancestors == []
            else:
                parent = nodes[node.parent_id]
                assert node.ancestors == parent.ancestors + [parent.id]

    return _check
