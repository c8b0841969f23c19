"""
Shared pytest fixtures for the Studio Manager tests.

This module provides:
- An in-memory SQLite database per test (fast, isolated)
- Both repositories: SqlRepository on that database, JsonFileRepository on a
  temporary file
- A TestClient whose requests use the test repository
- Fixtures creating test objects (slot, plan, member, lead, product)

Services are written against the Repository interface, so fixtures take a
``repo`` and tests parametrized on ``any_repo`` run on both backends.
"""

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from app.api.v1.dependencies import get_repository
from app.database.base import Base
from app.main import app
from app.models import Lead, Member, MembershipPlan, PlanType, Product, SessionSlot
from app.repositories import JsonFileRepository, Repository, SqlRepository

from tests.factories import make_lead, make_member, make_plan, make_product, make_slot


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def engine():
    """
    In-memory SQLite engine for the tests.

    StaticPool keeps the single connection alive so the TestClient threads
    see the same database.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,  # True to debug SQL
    )

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    session = Session(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sql_repo(db_session: Session) -> SqlRepository:
    return SqlRepository(db_session)


@pytest.fixture
def local_repo(tmp_path) -> JsonFileRepository:
    return JsonFileRepository(tmp_path / "studio.json")


@pytest.fixture
def repo(sql_repo: SqlRepository) -> Repository:
    """Default repository: SQL."""
    return sql_repo


@pytest.fixture(params=["sql", "local"])
def any_repo(request) -> Repository:
    """Runs the test once per storage backend."""
    if request.param == "sql":
        return request.getfixturevalue("sql_repo")
    return request.getfixturevalue("local_repo")


# =============================================================================
# API CLIENT
# =============================================================================

@pytest.fixture
def client(sql_repo: SqlRepository) -> Generator[TestClient, None, None]:
    """Test client whose requests run on the test database."""

    def override_get_repository():
        yield sql_repo

    app.dependency_overrides[get_repository] = override_get_repository

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# MODEL FIXTURES
# =============================================================================

@pytest.fixture
def slot(repo: Repository) -> SessionSlot:
    return make_slot(repo)


@pytest.fixture
def evening_slot(repo: Repository) -> SessionSlot:
    return make_slot(repo, start="19:30", end="20:30", display_name="Evening 7:30 PM")


@pytest.fixture
def plan(repo: Repository) -> MembershipPlan:
    return make_plan(repo)


@pytest.fixture
def quarterly_plan(repo: Repository) -> MembershipPlan:
    return make_plan(repo, name="Quarterly", price="5500", months=3, plan_type=PlanType.QUARTERLY)


@pytest.fixture
def member(repo: Repository) -> Member:
    return make_member(repo)


@pytest.fixture
def lead(repo: Repository) -> Lead:
    return make_lead(repo)


@pytest.fixture
def product(repo: Repository) -> Product:
    return make_product(repo)
